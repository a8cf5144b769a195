"""
ID3v2 tagger for MP3 files.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import mutagen.id3 as id3
from mutagen import MutagenError

from .core import Tagger, TagParseError, TagIOError
from .cover import id3_picture, id3_url_picture
from .utils import Config, to_latin1

logger = logging.getLogger(__name__)

class Mp3Tagger(Tagger):
    """
    Fill-if-absent tagger for ID3v2 tags.

    The file is opened read/write for the lifetime of the session; ``save()``
    writes the tag through that handle and closes it.
    """

    format = 'mp3'

    def __init__(self, path: Union[str, Path]):
        super().__init__(path)
        try:
            self._fileobj = open(self.path, 'rb+')
        except OSError as e:
            raise TagIOError(f"Failed to open {self.path}: {e}") from e

        try:
            self.tags = id3.ID3(self._fileobj)
        except id3.ID3NoHeaderError:
            logger.debug(f"No ID3 tag in {self.path}, starting an empty one")
            self.tags = id3.ID3()
        except id3.error as e:
            self._fileobj.close()
            raise TagParseError(f"Malformed ID3 tag in {self.path}: {e}") from e
        except (MutagenError, OSError) as e:
            self._fileobj.close()
            raise TagIOError(f"Failed to read {self.path}: {e}") from e

    def _text(self, frame_id: str) -> str:
        """Return the text of the first ``frame_id`` frame, or '' if there is none."""
        frame = self.tags.get(frame_id)
        if frame is None or not frame.text:
            return ''
        return str(frame.text[0])

    def _has_frames(self, frame_id: str) -> bool:
        return len(self.tags.getall(frame_id)) > 0

    def _cover_desc(self) -> str:
        # ID3 allows one APIC per description, so number the extra covers
        base = Config.COVER_DESCRIPTION
        used = {frame.desc for frame in self.tags.getall('APIC')}
        if base not in used:
            return base
        n = 2
        while f"{base} ({n})" in used:
            n += 1
        return f"{base} ({n})"

    def set_cover(self, data: bytes, mime: str) -> None:
        self.tags.add(id3_picture(data, mime, desc=self._cover_desc()))

    def set_cover_url(self, url: str) -> None:
        self.tags.add(id3_url_picture(url, desc=self._cover_desc()))

    def set_title(self, title: str) -> None:
        if self._text('TIT2') == '':
            self.tags.setall('TIT2', [id3.TIT2(encoding=id3.Encoding.UTF8, text=[title])])

    def set_album(self, album: str) -> None:
        if self._text('TALB') == '':
            self.tags.setall('TALB', [id3.TALB(encoding=id3.Encoding.UTF8, text=[album])])

    def set_artist(self, artists: List[str]) -> None:
        if self._has_frames('TPE1') or not artists:
            return
        self.tags.add(id3.TPE1(encoding=id3.Encoding.UTF8, text=list(artists)))

    def set_comment(self, comment: str) -> None:
        if self._has_frames('COMM'):
            return
        text = to_latin1(comment)
        if text != comment:
            logger.warning(f"Comment for {self.path} has characters outside Latin-1, replaced with '?'")
        self.tags.add(id3.COMM(
            encoding=id3.Encoding.LATIN1,
            lang=Config.COMMENT_LANGUAGE,
            desc='',
            text=[text],
        ))

    def save(self) -> None:
        """
        Write the tag into the file and close the file handle.

        The handle is closed on every exit path. The first failure is raised
        as TagIOError; a close failure after a write failure is only logged.
        """
        error: Optional[Exception] = None
        close_error: Optional[OSError] = None
        try:
            if Config.ID3_VERSION == 3:
                self.tags.update_to_v23()
            self.tags.save(self._fileobj, v2_version=Config.ID3_VERSION)
            logger.debug(f"Saved ID3v2.{Config.ID3_VERSION} tag to {self.path}")
        except Exception as e:
            error = e
        finally:
            close_error = self._release()

        if error is not None:
            if close_error is not None:
                logger.warning(f"Error closing {self.path} after failed save: {close_error}")
            raise TagIOError(f"Failed to save {self.path}: {error}") from error
        if close_error is not None:
            raise TagIOError(f"Failed to save {self.path}: {close_error}") from close_error

    def _release(self) -> Optional[OSError]:
        """Close the file handle, returning the close error instead of raising it."""
        try:
            self._fileobj.close()
        except OSError as e:
            return e
        return None

    def close(self) -> None:
        close_error = self._release()
        if close_error is not None:
            logger.warning(f"Error closing {self.path}: {close_error}")
