"""tagfill – fill in missing MP3/FLAC metadata without touching what is already there."""

__version__ = "0.1.0"

from .core import (
    Tagger,
    TagfillError,
    TagParseError,
    UnsupportedFormatError,
    TagIOError,
    PictureEncodeError,
)
from .mp3 import Mp3Tagger
from .flac import FlacTagger
from .tagger import new_tagger, managed_tagger, format_from_path, SUPPORTED_FORMATS
from .processor import fill_file
from .utils import Config, COVER_URL_MIME

__all__ = [
    "Tagger",
    "TagfillError",
    "TagParseError",
    "UnsupportedFormatError",
    "TagIOError",
    "PictureEncodeError",
    "Mp3Tagger",
    "FlacTagger",
    "new_tagger",
    "managed_tagger",
    "format_from_path",
    "SUPPORTED_FORMATS",
    "fill_file",
    "Config",
    "COVER_URL_MIME",
]
