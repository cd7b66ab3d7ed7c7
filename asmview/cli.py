"""Command-line front door for asmview.

Parses CLI options, loads a session for the target binary through the
configured backend, then prints the requested views, search results, and
language-model answers.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from pathlib import Path

from .backend import BackendChannel, HttpBackendChannel, Radare2Channel
from .config import load_backend_settings, load_config, load_language_model_settings
from .errors import AsmviewError
from .llm import ChatConversation, LanguageModelClient, translate_listing
from .render import (
    listing_text,
    render_functions,
    render_listing,
    render_strings,
    render_symbol_detail,
    render_symbols,
)
from .search import ListingView
from .session import Session, describe_symbol, function_listing, load_session, locate_string

logger = logging.getLogger(__name__)

SHOW_CHOICES = ("functions", "imports", "exports", "strings", "listing")
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def _stdout_is_tty() -> bool:
    try:
        return os.isatty(sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect a binary through radare2: functions, symbols, strings, and listings."
    )
    parser.add_argument("binary", help="Path to the binary to analyse.")
    parser.add_argument(
        "--show",
        action="append",
        choices=SHOW_CHOICES,
        default=None,
        help="View to print; repeatable (default: functions).",
    )
    parser.add_argument("--function", metavar="NAME", help="Disassemble one function by name or address.")
    parser.add_argument("--symbol", metavar="NAME", help="Show context and cross-references for an import or export.")
    parser.add_argument("--string", metavar="TEXT", help="Show the listing with a string from the string table highlighted.")
    parser.add_argument("--search", metavar="TERM", help="Highlight TERM in the printed listing.")
    parser.add_argument("--filter", action="store_true", help="With --search, hide lines without a match.")
    parser.add_argument("--translate", action="store_true", help="Translate the listing into Python via the language model.")
    parser.add_argument(
        "--ask",
        metavar="QUESTION",
        action="append",
        default=[],
        help="Ask the language model about the binary; repeatable, answers share history.",
    )
    parser.add_argument("--backend-url", metavar="URL", help="Use a radare2 HTTP proxy instead of a local process.")
    parser.add_argument("--radare2", metavar="PATH", help="radare2 executable (default from config, else radare2).")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Clip output rows to this width (default: terminal width).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress at debug level.")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _progress(message: str) -> None:
    sys.stderr.write(f"... {message}\n")
    sys.stderr.flush()


def _build_channel(args: argparse.Namespace, config: dict[str, object]) -> BackendChannel:
    settings = load_backend_settings(config)
    backend_url = args.backend_url or settings.backend_url
    if backend_url:
        return HttpBackendChannel(backend_url)
    return Radare2Channel(args.radare2 or settings.radare2_path)


def _print_views(
    session: Session,
    views: list[str],
    args: argparse.Namespace,
    no_color: bool,
    max_cols: int,
) -> None:
    out = sys.stdout
    for view in views:
        if view == "functions":
            out.write(render_functions(session.functions, max_cols))
        elif view == "imports":
            out.write(render_symbols(session.imports, max_cols))
        elif view == "exports":
            out.write(render_symbols(session.exports, max_cols))
        elif view == "strings":
            out.write(render_strings(session.strings, max_cols))
        elif view == "listing":
            listing_view = ListingView(session.listing)
            if args.search:
                listing_view.search(args.search, filter_enabled=args.filter)
            out.write(render_listing(listing_view, no_color, max_cols))


def run(args: argparse.Namespace) -> None:
    """Execute a parsed command line; ``AsmviewError`` propagates to the caller."""
    binary = Path(args.binary)
    if not binary.exists():
        raise SystemExit(f"Path not found: {binary}")

    config = load_config()
    channel = _build_channel(args, config)
    max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
    no_color = args.no_color or not _stdout_is_tty()

    session = load_session(channel, binary, progress=_progress)
    views = args.show or (["listing"] if args.search else ["functions"])
    _print_views(session, views, args, no_color, max_cols)

    if args.function:
        entry = session.find_function(args.function)
        if entry is None:
            raise SystemExit(f"Function not found: {args.function}")
        document = function_listing(channel, session, entry)
        view = ListingView(document)
        if args.search:
            view.search(args.search, filter_enabled=args.filter)
        sys.stdout.write(render_listing(view, no_color, max_cols))

    if args.symbol:
        symbol = session.find_symbol(args.symbol)
        if symbol is None:
            raise SystemExit(f"Symbol not found: {args.symbol}")
        detail = describe_symbol(channel, session, symbol)
        sys.stdout.write(render_symbol_detail(detail, no_color, max_cols))

    if args.string:
        entry = session.find_string(args.string)
        if entry is None:
            raise SystemExit(f"String not found: {args.string}")
        sys.stdout.write(render_listing(locate_string(session, entry), no_color, max_cols))

    if args.translate or args.ask:
        client = LanguageModelClient(load_language_model_settings(config))
        context = listing_text(session.listing)
        if args.translate:
            sys.stdout.write(translate_listing(client, context) + "\n")
        conversation = ChatConversation(client, context)
        for question in args.ask:
            sys.stdout.write(f"> {question}\n{conversation.ask(question)}\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run asmview against one binary."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        run(args)
    except AsmviewError as exc:
        logger.debug("aborting", exc_info=True)
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
