"""
Tagger - the capability contract shared by every container format.

A tagger is a session bound to one audio file. It parses the existing tags
when it is created, collects changes in memory through the ``set_*`` methods
and writes everything back in a single ``save()`` call. Text fields are only
filled when the file does not already carry them; covers are always added.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Union

logger = logging.getLogger(__name__)

class TagfillError(Exception):
    """Base exception for tagfill errors."""
    pass

class TagParseError(TagfillError):
    """Raised when existing tag data in a file is malformed."""
    pass

class UnsupportedFormatError(TagfillError):
    """Raised when no tagger exists for the requested format name."""

    def __init__(self, format_name: str):
        super().__init__(f"format: {format_name} is not supported")
        self.format_name = format_name

class TagIOError(TagfillError):
    """Raised when reading or writing the audio file fails."""
    pass

class PictureEncodeError(TagfillError):
    """Raised when cover image bytes or MIME type cannot be encoded."""
    pass

class Tagger(ABC):
    """
    Fill-if-absent metadata writer for a single audio file.

    Subclasses load the file in ``__init__``. ``save()`` must be called exactly
    once to persist changes; ``close()`` releases the session without writing.
    """

    format = ''

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @abstractmethod
    def set_cover(self, data: bytes, mime: str) -> None:
        """Add ``data`` as an embedded front cover image of type ``mime``."""

    @abstractmethod
    def set_cover_url(self, url: str) -> None:
        """Add a front cover entry that references ``url`` instead of embedding an image."""

    @abstractmethod
    def set_title(self, title: str) -> None:
        """Set the title unless the file already has one."""

    @abstractmethod
    def set_album(self, album: str) -> None:
        """Set the album unless the file already has one."""

    @abstractmethod
    def set_artist(self, artists: List[str]) -> None:
        """Set one artist entry per element, in order, unless artists already exist."""

    @abstractmethod
    def set_comment(self, comment: str) -> None:
        """Set the comment unless one exists. Formats without comments ignore it."""

    @abstractmethod
    def save(self) -> None:
        """Write all accumulated changes back to ``self.path``."""

    def close(self) -> None:
        """Release resources held by the session without saving."""

    def __enter__(self) -> 'Tagger':
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"
