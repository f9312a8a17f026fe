"""
Command-line interface for kinonote.

Searches the catalog, creates notes in a vault, renders saved API responses
offline and checks API tokens.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from .config import DEFAULT_CONFIG_PATH, load_settings, setup_logging
from .errors import KinonoteError
from .file_naming import FileNamer
from .i18n import MessageCatalog
from .kinopoisk_client import KinopoiskClient
from .normalizer import RecordNormalizer, translate_type
from .notes import NoteCreator
from .templating import TemplateSubstitutor

logger = logging.getLogger(__name__)


class TqdmProgress:
    """Image progress callback backed by a tqdm bar."""

    def __init__(self):
        self.bar: Optional[tqdm] = None

    def __call__(self, current: int, total: int, message: str):
        if total == 0:
            tqdm.write(message)
            return
        if self.bar is None:
            self.bar = tqdm(total=total, desc="Images", unit="img")
        self.bar.set_postfix_str(message)
        self.bar.update(current - self.bar.n)

    def close(self):
        if self.bar is not None:
            self.bar.close()


def create_cli() -> argparse.ArgumentParser:
    """Create command-line interface."""
    parser = argparse.ArgumentParser(description="kinonote - Kinopoisk notes for Markdown vaults")

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Configuration file path",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search movies and series by title")
    search.add_argument("query", help="Title to search for")

    create = subparsers.add_parser("create", help="Create a note for a catalog ID")
    create.add_argument("movie_id", type=int, help="Kinopoisk ID")

    render = subparsers.add_parser("render", help="Render a note from a saved API response")
    render.add_argument("raw_json", type=str, help="Path to a saved /movie/{id} response")
    render.add_argument("--template", "-t", type=str, required=True, help="Template file path")
    render.add_argument("--name-format", type=str, help="File name format, e.g. '{{nameForFile}} ({{year}})'")

    subparsers.add_parser("check-token", help="Validate the configured API token")

    return parser


def _search(args, settings, messages: MessageCatalog) -> None:
    client = KinopoiskClient(settings.api_token, messages)
    for item in client.search_by_query(args.query):
        item_type = translate_type(item.type) if item.type else ""
        print(f"{item.id}\t{item.display_name}\t{item.year or ''}\t{item_type}")


def _create(args, settings, messages: MessageCatalog) -> None:
    progress = TqdmProgress()
    try:
        path = NoteCreator(settings, messages=messages).create_note(args.movie_id, progress)
    finally:
        progress.close()
    print(messages.lookup_with_params("cli.noteCreated", {"path": path}))


def _render(args, settings, messages: MessageCatalog) -> None:
    with open(args.raw_json, "r", encoding="utf-8") as f:
        raw = json.load(f)

    record = RecordNormalizer().normalize(raw)
    template = Path(args.template).read_text(encoding="utf-8")

    substitutor = TemplateSubstitutor()
    file_name = FileNamer(messages, substitutor).make_file_name(
        record, exists=lambda path: False, name_format=args.name_format
    )

    print(file_name)
    print(substitutor.render(record, template))


def _check_token(args, settings, messages: MessageCatalog) -> bool:
    if KinopoiskClient(settings.api_token, messages).validate_token():
        print(messages.lookup("cli.tokenValid"))
        return True
    print(messages.lookup("cli.tokenInvalid"), file=sys.stderr)
    return False


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    load_dotenv()

    parser = create_cli()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        setup_logging(settings)

        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        messages = MessageCatalog(settings.language)

        if args.command == "search":
            _search(args, settings, messages)
        elif args.command == "create":
            _create(args, settings, messages)
        elif args.command == "render":
            _render(args, settings, messages)
        elif args.command == "check-token":
            if not _check_token(args, settings, messages):
                sys.exit(1)

    except KinonoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
