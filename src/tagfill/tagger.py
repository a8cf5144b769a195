"""
Format dispatch: pick the tagger for a container format name.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from .core import Tagger, UnsupportedFormatError
from .mp3 import Mp3Tagger
from .flac import FlacTagger

logger = logging.getLogger(__name__)

TAGGERS = {
    'mp3': Mp3Tagger,
    'flac': FlacTagger,
}

SUPPORTED_FORMATS = tuple(TAGGERS)

def format_from_path(path: Union[str, Path]) -> str:
    """Return the format name implied by a file's extension ('song.FLAC' -> 'flac')."""
    return Path(path).suffix.lower().lstrip('.')

def new_tagger(path: Union[str, Path], fmt: str) -> Tagger:
    """
    Open ``path`` with the tagger for ``fmt`` (case-insensitive).

    Raises:
        UnsupportedFormatError: for unknown formats, before touching the file
    """
    tagger_cls = TAGGERS.get((fmt or '').lower())
    if tagger_cls is None:
        raise UnsupportedFormatError(fmt)
    return tagger_cls(path)

@contextmanager
def managed_tagger(path: Union[str, Path], fmt: Optional[str] = None) -> Generator[Tagger, None, None]:
    """Context manager around new_tagger that always releases the session."""
    if fmt is None:
        fmt = format_from_path(path)
    tagger = None
    try:
        tagger = new_tagger(path, fmt)
        yield tagger
    except Exception as e:
        logger.error(f"Tagging failed for {path}: {e}")
        raise
    finally:
        if tagger:
            tagger.close()
