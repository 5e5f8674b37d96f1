from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from .models import ClassificationResult, Outcome, WalkTotals
from .pathrules import ScanConfig


def _plural(count: int, one: str, many: str) -> str:
    return one if count == 1 else many

def format_result(name: str, result: ClassificationResult, config: ScanConfig) -> str:
    if result.outcome is Outcome.CORRECT:
        return f"{name} - is {config.text_type}"
    if result.outcome is Outcome.ENCODING_ERROR:
        return f"{name} - invalid character set name <{config.encoding}>"
    if result.outcome is Outcome.IO_ERROR:
        return f"{name} - {result.message}"
    line = name
    if result.bad_char is not None:
        line += f" - invalid character, 0x{result.bad_char:X}"
    if result.trailing_space:
        line += " - trailing spaces or tabs"
    return line

def format_summary(totals: WalkTotals) -> str:
    return (
        f"Found {totals.files:,} {_plural(totals.files, 'file', 'files')}"
        f" in {totals.folders:,} {_plural(totals.folders, 'folder', 'folders')}:"
        f" {totals.correct:,} {_plural(totals.correct, 'was', 'were')} correct"
        f" and {totals.errors:,} had errors."
    )

def to_json(paths: Sequence[str], config: ScanConfig, totals: WalkTotals, lines: List[str], cancelled: bool = False) -> Dict[str, Any]:
    return {
        "paths": list(paths),
        "config": {
            "encoding": config.encoding,
            "check_plain": config.check_plain,
            "check_trim": config.check_trim,
            "suffixes": list(config.suffix_filter.suffixes) if config.suffix_filter.active else [],
            "recurse": config.recurse,
            "include_hidden": config.include_hidden,
            "show": config.report_which.value,
        },
        "totals": asdict(totals),
        "status": totals.status.value,
        "cancelled": cancelled,
        "lines": lines,
    }

def json_dumps(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=False)

def to_text_report(lines: List[str]) -> str:
    return "\n".join(lines) + ("\n" if lines else "")
