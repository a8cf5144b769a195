"""
One-shot tagging of a single file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core import TagfillError, PictureEncodeError
from .cover import sniff_mime
from .tagger import managed_tagger, format_from_path
from .utils import parse_list_string

logger = logging.getLogger(__name__)

ProcessResultType = Dict[str, Any]

def _apply_cover(tagger, metadata: Dict[str, Any], record: ProcessResultType) -> None:
    """Add the cover(s) from metadata; bad images are recorded as warnings."""
    data = metadata.get('cover')
    if data:
        mime = metadata.get('cover_mime') or sniff_mime(data)
        if not mime:
            record['warnings'].append('cover: unrecognised image data')
        else:
            try:
                tagger.set_cover(data, mime)
                record['requested'].append('cover')
            except PictureEncodeError as e:
                logger.warning(f"Skipping cover for {tagger.path}: {e}")
                record['warnings'].append(f'cover: {e}')

    url = metadata.get('cover_url')
    if url:
        try:
            tagger.set_cover_url(url)
            record['requested'].append('cover_url')
        except PictureEncodeError as e:
            logger.warning(f"Skipping cover URL for {tagger.path}: {e}")
            record['warnings'].append(f'cover_url: {e}')

def fill_file(path: Union[str, Path],
              metadata: Dict[str, Any],
              fmt: Optional[str] = None) -> ProcessResultType:
    """
    Fill missing metadata in one file and save it.

    Args:
        path: Audio file to update
        metadata: Any of 'title', 'album', 'artist' (list or ';'-separated str),
            'comment', 'cover' (bytes), 'cover_mime', 'cover_url'
        fmt: Container format name; defaults to the file extension

    Returns:
        Result record with 'path', 'format', 'passed', 'requested',
        'warnings' and 'error'
    """
    file_path = Path(path)
    fmt = fmt or format_from_path(file_path)
    record: ProcessResultType = {
        'path': str(file_path),
        'format': fmt,
        'passed': False,
        'requested': [],
        'warnings': [],
        'error': None,
    }

    try:
        with managed_tagger(file_path, fmt) as tagger:
            if metadata.get('title'):
                tagger.set_title(metadata['title'])
                record['requested'].append('title')
            if metadata.get('album'):
                tagger.set_album(metadata['album'])
                record['requested'].append('album')
            artists = metadata.get('artist')
            if isinstance(artists, str):
                artists = parse_list_string(artists)
            if artists:
                tagger.set_artist(list(artists))
                record['requested'].append('artist')
            if metadata.get('comment'):
                tagger.set_comment(metadata['comment'])
                record['requested'].append('comment')

            _apply_cover(tagger, metadata, record)

            tagger.save()
    except TagfillError as e:
        record['error'] = str(e)
        return record

    logger.info(f"Tagged {file_path} ({', '.join(record['requested']) or 'nothing to do'})")
    record['passed'] = True
    return record
