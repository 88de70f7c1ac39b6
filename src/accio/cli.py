"""Command-line front door for accio.

Provides the ``ls``, ``pwd``, ``search`` and ``config`` subcommands. The
search command prompts for whatever the flags leave open, shows a spinner
with the number of directories scanned, then prints the matched paths.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from . import __version__
from .config import ConfigurationError, create_config_template, load_config, validate_config_file
from .errors import InvalidRootError
from .log_setup import setup_logging
from .models.config import FinderConfig, ProgressConfig
from .models.search_query import SearchQuery
from .tools.fs_walker import FSWalker


logger = logging.getLogger(__name__)

GREEN = "\x1b[32m"
RESET = "\x1b[0m"


def format_duration(seconds: float) -> str:
    """Format elapsed seconds as ``"<m>mins <s>secs"`` using whole seconds."""
    total_secs = int(seconds)
    minutes, secs = divmod(total_secs, 60)
    return f"{minutes}mins {secs}secs"


class SearchSpinner:
    """Spinner showing how many directories have been scanned so far.

    ``update`` is meant to be used as the walker's progress callback. The
    last tick character is the resting frame and is not part of the cycle.
    """

    def __init__(self, config: Optional[ProgressConfig] = None, file=None):
        config = config or ProgressConfig()
        self._ticks = config.tick_chars[:-1]
        self._frame = 0
        self._bar = tqdm(
            total=None,
            bar_format="{desc} Directories scanned: {n}",
            desc=self._ticks[0],
            disable=not config.enabled,
            leave=False,
            file=file or sys.stderr,
        )

    def update(self, n: int = 1) -> None:
        self._frame = (self._frame + 1) % len(self._ticks)
        self._bar.set_description_str(self._ticks[self._frame], refresh=False)
        self._bar.update(n)

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> "SearchSpinner":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _prompt(message: str) -> str:
    try:
        return input(message).strip()
    except EOFError:
        return ""


def _wants_parallel(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="accio",
        description="Fast file utility: list, locate and search for files by name.",
    )
    parser.add_argument("--version", action="version", version=f"accio {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    subparsers.add_parser("ls", help="List files in the current directory")
    subparsers.add_parser("pwd", help="Print the current working directory")

    search = subparsers.add_parser(
        "search",
        help="Search for a file within a directory (supports parallel mode)",
    )
    search.add_argument("filename", help="Filename to search for (exact, case-insensitive)")
    search.add_argument(
        "--root", "-r",
        help="Directory to scan (prompted for when omitted)",
    )
    mode = search.add_mutually_exclusive_group()
    mode.add_argument(
        "--parallel", "-p",
        dest="parallel",
        action="store_const",
        const=True,
        default=None,
        help="Walk subdirectories concurrently",
    )
    mode.add_argument(
        "--sequential", "-s",
        dest="parallel",
        action="store_const",
        const=False,
        help="Walk the tree on a single thread",
    )
    search.add_argument("--config", "-c", help="Path to a YAML configuration file")
    search.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show the directory-count spinner",
    )
    search.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output and report unreadable directories",
    )

    config = subparsers.add_parser("config", help="Create or check a configuration file")
    config_sub = config.add_subparsers(dest="config_command", metavar="ACTION")
    config_sub.required = True
    init = config_sub.add_parser("init", help="Write a commented configuration template")
    init.add_argument("path", nargs="?", default=".accio.yaml", help="Where to write the template")
    check = config_sub.add_parser("check", help="Validate a configuration file")
    check.add_argument("path", help="Configuration file to validate")

    return parser


def _cmd_pwd() -> int:
    print(Path.cwd())
    return 0


def _cmd_ls() -> int:
    current_dir = Path.cwd()
    print(f"Contents of {current_dir}:")
    try:
        names = sorted(entry.name for entry in os.scandir(current_dir))
    except OSError as e:
        print(f"Cannot read directory {current_dir}: {e}", file=sys.stderr)
        return 1
    for name in names:
        print(name)
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    if args.config_command == "init":
        try:
            create_config_template(args.path)
        except ConfigurationError as e:
            print(str(e), file=sys.stderr)
            return 1
        print(f"Configuration template written to {args.path}")
        return 0

    errors = validate_config_file(args.path)
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        return 1
    print(f"{args.path} is valid")
    return 0


def _print_results(filename: str, matches: List[str], duration: str) -> None:
    if not matches:
        print(f"No file named '{filename}' found. (Completed in {duration})")
        return

    header = "Found the following files:"
    if sys.stdout.isatty():
        header = f"{GREEN}{header}{RESET}"
    print(f"{header} (Completed in {duration})")
    for path in matches:
        print(path)


def _cmd_search(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config).config
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.logging, verbose=args.verbose)
    logger.debug(f"Using configuration: {config}")

    root = args.root if args.root is not None else _prompt("Enter directory path to scan: ")
    if not root or not Path(root).expanduser().is_dir():
        print(f"The path '{root}' is not a valid directory.", file=sys.stderr)
        return 1

    parallel = _resolve_mode(args.parallel, config)

    try:
        query = SearchQuery(
            root=root,
            target=args.filename,
            parallel=parallel,
            max_workers=config.search.max_workers,
        )
    except ValidationError as e:
        print(f"Invalid search: {e}", file=sys.stderr)
        return 2

    print(f"Starting {query.mode} search...")
    progress = config.progress.model_copy(update={"enabled": config.progress.enabled and not args.no_progress})
    walker = FSWalker(config)
    try:
        with SearchSpinner(progress) as spinner:
            results = walker.search(query, progress=spinner.update)
    except InvalidRootError as e:
        print(str(e), file=sys.stderr)
        return 1

    _print_results(args.filename, results.matches, format_duration(results.execution_time))

    if args.verbose and results.has_errors():
        print(f"Skipped {len(results.errors)} unreadable directories:", file=sys.stderr)
        for error in results.errors:
            print(f"  {error}", file=sys.stderr)
    return 0


def _resolve_mode(flag: Optional[bool], config: FinderConfig) -> bool:
    """Pick the strategy from the command line, then config, then ask."""
    if flag is not None:
        return flag
    if config.search.parallel is not None:
        return config.search.parallel
    return _wants_parallel(_prompt("Use parallel search? (y/n): "))


def main(argv: Optional[List[str]] = None) -> int:
    """Parse CLI arguments and run the selected subcommand.

    Returns the process exit code: 0 on success, 1 for an invalid root or a
    failed config action, 2 for a configuration that cannot be loaded.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "pwd":
        return _cmd_pwd()
    if args.command == "ls":
        return _cmd_ls()
    if args.command == "config":
        return _cmd_config(args)
    return _cmd_search(args)
