"""
Utility functions and configuration for tagfill.
"""

import os
import sys
import logging
from pathlib import Path
from typing import List, Optional
from logging.handlers import RotatingFileHandler

# ---------- Constants ----------
EXIT_CODE_SUCCESS = 0
EXIT_CODE_ERROR = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_PERMISSION = 4
EXIT_CODE_INTERRUPTED = 130

# MIME value marking a picture payload as a URL string instead of image data
COVER_URL_MIME = '-->'

# ---------- Configuration ----------
class Config:
    """Configuration management with validation."""
    ID3_VERSION = 4
    COVER_DESCRIPTION = 'Front cover'
    COMMENT_LANGUAGE = 'XXX'
    # FLAC metadata block lengths are 24-bit; leave room for the picture header
    MAX_COVER_SIZE = (1 << 24) - 1 - 1024
    DEFAULT_ENCODING = 'utf-8'
    LOG_DIR = 'logs'

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if cls.ID3_VERSION not in (3, 4):
            raise ValueError(f"Invalid ID3_VERSION: {cls.ID3_VERSION} (expected 3 or 4)")
        if not cls.COVER_DESCRIPTION:
            raise ValueError("COVER_DESCRIPTION cannot be empty")
        if len(cls.COMMENT_LANGUAGE) != 3:
            raise ValueError("COMMENT_LANGUAGE must be a 3 letter code")
        if cls.MAX_COVER_SIZE <= 0:
            raise ValueError("MAX_COVER_SIZE must be positive")
        if not cls.LOG_DIR:
            raise ValueError("LOG_DIR cannot be empty")

    @classmethod
    def load_from_env(cls) -> None:
        """Load configuration from environment variables, updating class attributes."""
        try:
            if os.getenv('TAGFILL_ID3_VERSION'):
                cls.ID3_VERSION = int(os.getenv('TAGFILL_ID3_VERSION'))
            if os.getenv('TAGFILL_MAX_COVER_SIZE'):
                cls.MAX_COVER_SIZE = int(os.getenv('TAGFILL_MAX_COVER_SIZE'))
        except ValueError as e:
            raise ValueError(f"Invalid numeric environment value: {e}")
        if os.getenv('TAGFILL_COVER_DESCRIPTION'):
            cls.COVER_DESCRIPTION = os.getenv('TAGFILL_COVER_DESCRIPTION')
        if os.getenv('TAGFILL_LOG_DIR'):
            cls.LOG_DIR = os.getenv('TAGFILL_LOG_DIR')
        cls.validate()

# ---------- Logging Setup ----------
def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rotation and proper formatting."""
    log_level = logging.DEBUG if verbose else logging.INFO

    log_dir = Path(Config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / 'tagfill.log',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            file_handler
        ]
    )

# ---------- Small Helpers ----------
def parse_list_string(s: Optional[str], delimiter: str = ';') -> List[str]:
    """
    Parse delimiter-separated string into list, stripping whitespace.

    Args:
        s: String to parse (None returns empty list)
        delimiter: Separator

    Returns:
        List of strings with empties removed
    """
    if s is None:
        return []
    parts = [p.strip() for p in str(s).split(delimiter)]
    return [p for p in parts if p != ""]

def to_latin1(text: str) -> str:
    """Return text restricted to Latin-1, replacing characters it cannot hold with '?'."""
    return text.encode('latin-1', errors='replace').decode('latin-1')

def join_for_printing(lst: List[str]) -> str:
    """Join list for display, showing '(none)' for empty lists."""
    return '(none)' if not lst else '; '.join(lst)
