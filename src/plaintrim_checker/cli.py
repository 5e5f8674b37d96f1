from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from .classifier import available_encodings
from .constants import EXIT_FAILURE, EXIT_SUCCESS, EXIT_UNKNOWN, LOCAL_ENCODING, PROGRAM_TITLE, RAW_ENCODING
from .engine import run_scan
from .logutil import setup_logging
from .models import CompletionStatus, ReportWhich, TextMode
from .pathrules import ScanConfig, SuffixFilter
from .report import json_dumps, to_json, to_text_report

ENCODING_SHORTCUTS = {
    "local": LOCAL_ENCODING,
    "raw": RAW_ENCODING,
}

EXIT_CODES = {
    CompletionStatus.SUCCESS: EXIT_SUCCESS,
    CompletionStatus.FAILURE: EXIT_FAILURE,
    CompletionStatus.UNKNOWN: EXIT_UNKNOWN,
}


def _font_size(text: str) -> int:
    try:
        size = int(text)
    except ValueError:
        size = -1
    if size < 10 or size > 99:
        raise argparse.ArgumentTypeError(f"font size must be from 10 to 99: {text}")
    return size

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="plaintrim-checker",
        description=f"{PROGRAM_TITLE}. Without file or folder names a graphical window opens.",
    )
    p.add_argument("paths", nargs="*", help="Files or folders to check")
    p.add_argument("--cli", action="store_true", help="Run in console mode even without paths")
    p.add_argument("-e", "--encoding", type=str, default=LOCAL_ENCODING,
                   help="Character set for reading files; 'local' (default) or 'raw' for 8-bit bytes")
    p.add_argument("-f", "--suffixes", type=str, default=None,
                   help="File types to check, separated by spaces, commas, etc. (example: '.java .txt')")
    p.add_argument("-m", "--mode", type=int, choices=[m.value for m in TextMode], default=TextMode.BOTH.value,
                   help="1 = plain text only, 2 = trimmed text only, 3 = both (default)")
    p.add_argument("-s", "--recurse", dest="recurse", action="store_true", help="Search folders and subfolders")
    p.add_argument("--no-recurse", dest="recurse", action="store_false", help="Only the given files and folders (default)")
    p.add_argument("--hidden", action="store_true", help="Include hidden files and subfolders")
    p.add_argument("--show", choices=[w.value for w in ReportWhich], default=ReportWhich.ALL.value,
                   help="Which files to report: all, correct or errors")
    p.add_argument("--json", type=str, default="", help="Also write a JSON report to this path")
    p.add_argument("--text", type=str, default="", help="Also write the plain text report to this path")
    p.add_argument("--font-size", type=_font_size, default=None, help="Font size for the graphical window (10-99)")
    p.add_argument("--list-encodings", action="store_true", help="List known character set names and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on standard error")
    p.set_defaults(recurse=False)
    return p

def config_from_args(args: argparse.Namespace) -> ScanConfig:
    encoding = ENCODING_SHORTCUTS.get(args.encoding.lower(), args.encoding)
    if args.suffixes is not None:
        suffix_filter = SuffixFilter.parse(args.suffixes)
    else:
        suffix_filter = SuffixFilter()
    return ScanConfig.for_mode(
        TextMode(args.mode),
        encoding=encoding,
        suffix_filter=suffix_filter,
        recurse=args.recurse,
        include_hidden=args.hidden,
        report_which=ReportWhich(args.show),
    )

def run_cli(args: argparse.Namespace) -> int:
    if args.list_encodings:
        for name in available_encodings():
            print(name)
        return EXIT_UNKNOWN

    cfg = config_from_args(args)
    cancel = threading.Event()
    lines: List[str] = []

    def emit(line: str) -> None:
        lines.append(line)
        print(line, flush=True)

    totals = run_scan(args.paths, cfg, emit, cancel=cancel)
    rc = EXIT_CODES[totals.status]
    try:
        if args.json:
            data = to_json(args.paths, cfg, totals, lines, cancelled=cancel.is_set())
            Path(args.json).write_text(json_dumps(data), encoding="utf-8")
        if args.text:
            Path(args.text).write_text(to_text_report(lines), encoding="utf-8")
    except OSError as e:
        print(f"Can't write report file: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return rc

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.cli or args.paths or args.list_encodings:
        return run_cli(args)

    from .ui_main import run_gui
    return run_gui(font_size=args.font_size)
