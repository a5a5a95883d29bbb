# -*- coding: utf-8 -*-
"""
HardStrings CLI Main Module
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from hardstrings import __version__
from hardstrings.core.documents import FileDocumentSource
from hardstrings.core.exceptions import ConfigError, ExtractionCancelled
from hardstrings.core.extraction import BatchExtractor
from hardstrings.core.models import ExtractionReport, ExtractionStatus
from hardstrings.core.progress import CancellationToken, NotificationKind, ProgressReporter
from hardstrings.core.settings import KEYGEN_STRATEGIES, KEYGEN_STYLES, ExtractionSettings
from hardstrings.core.store import JsonLocaleStore
from hardstrings.core.translator import build_translator
from hardstrings.utils.config import ConfigManager


class ConsoleReporter(ProgressReporter):
    """Prints progress on one status line and notifications below it."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def report(self, fraction: float, message: str) -> None:
        percent = int(fraction * 100)
        sys.stdout.write(f"\rProgress: {percent:3d}% - {message[:50].ljust(50)}")
        sys.stdout.flush()

    def notify(self, kind: NotificationKind, message: str) -> None:
        if self.verbose or kind is not NotificationKind.INFO:
            print(f"\n[{kind.value.upper()}] {message}")
        else:
            print(f"\n{message}")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def print_header():
    print("=" * 60)
    print(f"  HardStrings v{__version__} - hard-coded string extraction")
    print("=" * 60)


async def prompt_for_file(keypath: str, candidates: List[Path]) -> Optional[Path]:
    """Ask which locale file receives the keys of the current document."""
    if not sys.stdin.isatty():
        return candidates[0]

    print(f"\nWhere should '{keypath}' and the other keys of this file go?")
    for index, path in enumerate(candidates, 1):
        print(f"  {index}. {path}")
    try:
        answer = await asyncio.to_thread(input, "Select [1]: ")
    except EOFError:
        raise ExtractionCancelled("No locale file selected") from None

    answer = answer.strip()
    if not answer:
        return candidates[0]
    if answer.isdigit() and 1 <= int(answer) <= len(candidates):
        return candidates[int(answer) - 1]
    return None


def print_summary(reports: List[ExtractionReport]):
    print("\n" + "=" * 60)
    counts = {status: 0 for status in ExtractionStatus}
    for report in reports:
        counts[report.status] += 1
        if report.status is ExtractionStatus.FAILED:
            print(f"  FAILED  {report.path}: {report.error}")
        elif report.status is ExtractionStatus.DONE:
            print(f"  DONE    {report.path}: {report.extracted} string(s) extracted"
                  + (f", {report.dropped} dropped" if report.dropped else ""))
    print("\nStatistics:")
    print(f"  Files:     {len(reports)}")
    print(f"  Done:      {counts[ExtractionStatus.DONE]}")
    print(f"  Skipped:   {counts[ExtractionStatus.SKIPPED]}")
    print(f"  Cancelled: {counts[ExtractionStatus.CANCELLED]}")
    print(f"  Failed:    {counts[ExtractionStatus.FAILED]}")
    print(f"  Keys:      {sum(len(r.keys) for r in reports)}")
    print("=" * 60)


def exit_code_for(reports: List[ExtractionReport], token: CancellationToken) -> int:
    if any(r.status is ExtractionStatus.FAILED for r in reports):
        return 1
    if token.is_cancelled or any(r.status is ExtractionStatus.CANCELLED for r in reports):
        return 2
    return 0


def _install_sigint(token: CancellationToken) -> bool:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
        return True
    except (NotImplementedError, RuntimeError):
        # Windows event loops have no signal handler support
        signal.signal(signal.SIGINT, lambda *args: token.cancel())
        return False


async def run_extraction(paths: List[str], settings: ExtractionSettings, verbose: bool = False) -> int:
    token = CancellationToken()

    translator = build_translator(settings.translator) if settings.keygen_strategy == "english" else None
    store = JsonLocaleStore(settings.locales_dir, default_locale=settings.display_language)
    extractor = BatchExtractor(
        settings,
        FileDocumentSource(),
        store,
        translator=translator,
        reporter=ConsoleReporter(verbose),
        chooser=prompt_for_file,
        project_root=Path.cwd(),
    )
    via_loop = _install_sigint(token)

    try:
        reports = await extractor.extract_paths(paths, token)
    finally:
        if translator is not None:
            await translator.close()
        if via_loop:
            asyncio.get_running_loop().remove_signal_handler(signal.SIGINT)

    print_summary(reports)
    return exit_code_for(reports, token)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hardstrings",
        description=f"HardStrings v{__version__}: extract hard-coded strings into locale files",
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to extract from")
    parser.add_argument("--config", help="Path to JSON configuration file (default: hardstrings.json)")
    parser.add_argument("--framework", action="append",
                        help="Framework id to use (vue, svelte, react-i18next); repeatable")
    parser.add_argument("--strategy", choices=KEYGEN_STRATEGIES, help="Key generation strategy")
    parser.add_argument("--prefix", help="Prefix added to generated keys")
    parser.add_argument("--style", choices=KEYGEN_STYLES, help="Case style of generated keys")
    parser.add_argument("--concurrency", type=int, help="Strings processed in parallel (default: 3)")
    parser.add_argument("--locales", help="Directory holding the locale files (default: locales)")
    parser.add_argument("--dry-run", action="store_true", help="Show the changes without writing anything")
    parser.add_argument("--no-save", action="store_true", help="Do not save rewritten source files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    print_header()

    try:
        config = ConfigManager(args.config or "hardstrings.json")
        config.load_config()
        settings = config.apply_overrides(
            enabled_frameworks=tuple(args.framework) if args.framework else None,
            keygen_strategy=args.strategy,
            key_prefix=args.prefix,
            keygen_style=args.style,
            concurrency=args.concurrency,
            locales_dir=args.locales,
            dry_run=True if args.dry_run else None,
            save_after_extract=False if args.no_save else None,
        )
        return asyncio.run(run_extraction(args.paths, settings, args.verbose))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
