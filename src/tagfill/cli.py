"""tagfill CLI - fill in missing audio metadata from the command line."""
import os
import sys
import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List

from .cover import sniff_mime
from .processor import fill_file
from .tagger import SUPPORTED_FORMATS, format_from_path
from .utils import (
    Config,
    setup_logging,
    parse_list_string,
    join_for_printing,
    EXIT_CODE_SUCCESS,
    EXIT_CODE_ERROR,
    EXIT_CODE_USAGE,
    EXIT_CODE_PERMISSION,
    EXIT_CODE_INTERRUPTED,
)

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="tagfill - add missing title/album/artist/comment/cover tags to MP3 and FLAC files")

    parser.add_argument("path", help="Audio file to update")
    parser.add_argument("--format", dest="fmt", type=str.lower,
                        help=f"Container format ({', '.join(SUPPORTED_FORMATS)}); default: file extension")

    # Fields
    parser.add_argument("--title", help="Title, written only if the file has none")
    parser.add_argument("--album", help="Album, written only if the file has none")
    parser.add_argument("--artist", action='append', default=[],
                        help="Artist (repeatable, or ';'-separated), written only if the file has none")
    parser.add_argument("--comment", help="Comment (MP3 only), written only if the file has none")

    cover = parser.add_mutually_exclusive_group()
    cover.add_argument("--cover", help="Image file to embed as front cover")
    cover.add_argument("--cover-url", help="URL to store as an external front cover reference")

    # Logging
    parser.add_argument("--verbose", action='store_true', default=None,
                        help="Enable verbose logging (overrides TAGFILL_VERBOSE env var)")
    return parser

class ArgumentError(ValueError):
    """Invalid command line arguments; ``exit_code`` is the code main() exits with."""

    def __init__(self, message: str, exit_code: int = EXIT_CODE_USAGE):
        super().__init__(message)
        self.exit_code = exit_code

def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments."""
    errors = []
    permission_errors = []

    fmt = args.fmt or format_from_path(args.path)
    if fmt not in SUPPORTED_FORMATS:
        errors.append(f"Unsupported format: {fmt or '(none)'}")

    if not os.path.isfile(args.path):
        errors.append(f"File does not exist: {args.path}")
    elif not os.access(args.path, os.R_OK | os.W_OK):
        permission_errors.append(f"No read/write permission for file: {args.path}")

    if args.cover:
        if not os.path.isfile(args.cover):
            errors.append(f"Cover image does not exist: {args.cover}")
        elif not os.access(args.cover, os.R_OK):
            permission_errors.append(f"No read permission for cover image: {args.cover}")

    if not any([args.title, args.album, args.artist, args.comment, args.cover, args.cover_url]):
        errors.append("Nothing to write: give at least one of --title, --album, --artist, --comment, --cover, --cover-url")

    # Permission problems only get their own exit code when nothing else is wrong
    if errors or permission_errors:
        exit_code = EXIT_CODE_USAGE if errors else EXIT_CODE_PERMISSION
        raise ArgumentError("; ".join(errors + permission_errors), exit_code)

def build_metadata_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed arguments into the metadata mapping used by fill_file."""
    metadata: Dict[str, Any] = {}
    if args.title:
        metadata['title'] = args.title
    if args.album:
        metadata['album'] = args.album
    artists: List[str] = []
    for value in args.artist:
        artists.extend(parse_list_string(value))
    if artists:
        metadata['artist'] = artists
    if args.comment:
        metadata['comment'] = args.comment
    if args.cover:
        data = Path(args.cover).read_bytes()
        metadata['cover'] = data
        metadata['cover_mime'] = sniff_mime(data)
    if args.cover_url:
        metadata['cover_url'] = args.cover_url
    return metadata

def main() -> None:
    """Main CLI entry point."""
    try:
        args = build_parser().parse_args()

        if args.verbose is None:
            verbose_env = os.getenv('TAGFILL_VERBOSE', '').lower()
            args.verbose = verbose_env in ('1', 'true', 'yes')

        try:
            Config.load_from_env()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_USAGE)

        setup_logging(args.verbose)

        try:
            validate_args(args)
        except ArgumentError as e:
            logger.error(f"Argument validation failed: {e}")
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(e.exit_code)

        metadata = build_metadata_from_args(args)
        result = fill_file(args.path, metadata, fmt=args.fmt)

        for warning in result['warnings']:
            print(f"Warning: {warning}", file=sys.stderr)
        if not result['passed']:
            print(f"Error: {result['error']}", file=sys.stderr)
            sys.exit(EXIT_CODE_ERROR)

        print(f"{result['path']}: filled {join_for_printing(result['requested'])}")
        sys.exit(EXIT_CODE_SUCCESS)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(EXIT_CODE_INTERRUPTED)

if __name__ == "__main__":
    main()
