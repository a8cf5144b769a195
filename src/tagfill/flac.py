"""
Vorbis comment tagger for FLAC files.
"""

import logging
from pathlib import Path
from typing import List, Union

import mutagen.flac as flac
from mutagen import MutagenError

from .core import Tagger, TagParseError, TagIOError
from .cover import flac_picture, flac_url_picture

logger = logging.getLogger(__name__)

class FlacTagger(Tagger):
    """
    Fill-if-absent tagger for the FLAC metadata block chain.

    Text fields live in the Vorbis comment block; covers are separate PICTURE
    blocks appended to the chain. FLAC has no comment field here, so
    ``set_comment`` does nothing.
    """

    format = 'flac'

    def __init__(self, path: Union[str, Path]):
        super().__init__(path)
        try:
            fileobj = open(self.path, 'rb')
        except OSError as e:
            raise TagIOError(f"Failed to open {self.path}: {e}") from e

        with fileobj:
            try:
                self.mfile = flac.FLAC(fileobj)
            except (MutagenError, OSError) as e:
                raise TagParseError(f"Malformed FLAC metadata in {self.path}: {e}") from e

        if self.mfile.tags is not None:
            self.comments = self.mfile.tags
        else:
            logger.debug(f"No Vorbis comment block in {self.path}, starting an empty one")
            self.comments = flac.VCFLACDict()

    def _has_values(self, key: str) -> bool:
        return len(self.comments.get(key) or []) > 0

    def set_cover(self, data: bytes, mime: str) -> None:
        self.mfile.add_picture(flac_picture(data, mime))

    def set_cover_url(self, url: str) -> None:
        self.mfile.add_picture(flac_url_picture(url))

    def set_title(self, title: str) -> None:
        if not self._has_values('TITLE'):
            self.comments['TITLE'] = [title]

    def set_album(self, album: str) -> None:
        if not self._has_values('ALBUM'):
            self.comments['ALBUM'] = [album]

    def set_artist(self, artists: List[str]) -> None:
        if self._has_values('ARTIST') or not artists:
            return
        self.comments['ARTIST'] = list(artists)

    def set_comment(self, comment: str) -> None:
        pass

    def save(self) -> None:
        """Rewrite the metadata block chain, adding the comment block if the file had none."""
        if self.mfile.tags is None:
            self.mfile.tags = self.comments
            self.mfile.metadata_blocks.append(self.comments)
        try:
            self.mfile.save(self.path)
        except (MutagenError, OSError) as e:
            raise TagIOError(f"Failed to save {self.path}: {e}") from e
        logger.debug(f"Saved {len(self.mfile.metadata_blocks)} metadata blocks to {self.path}")
