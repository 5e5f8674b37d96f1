from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .constants import LOCAL_ENCODING, SUFFIX_DELIMITERS, TEXT_BOTH, TEXT_PLAIN, TEXT_TRIM
from .models import ReportWhich, TextMode


@dataclass(frozen=True)
class SuffixFilter:
    suffixes: Tuple[str, ...] = ()
    enabled: bool = False

    @classmethod
    def parse(cls, text: str, *, enabled: bool = True) -> "SuffixFilter":
        """Split a delimited list of file types into lowercase suffixes.

        No wildcards or regular expressions; duplicates keep their first position.
        """
        tokens: List[str] = []
        buf: List[str] = []
        for ch in text.lower() + " ":
            if ch in SUFFIX_DELIMITERS:
                if buf:
                    tokens.append("".join(buf))
                    buf = []
            else:
                buf.append(ch)
        return cls(suffixes=tuple(dict.fromkeys(tokens)), enabled=enabled)

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.suffixes)

    def matches(self, name: str) -> bool:
        if not self.active:
            return True
        lower = name.lower()
        return any(lower.endswith(s) for s in self.suffixes)


@dataclass(frozen=True)
class ScanConfig:
    encoding: str = LOCAL_ENCODING
    check_plain: bool = True
    check_trim: bool = True
    suffix_filter: SuffixFilter = field(default_factory=SuffixFilter)
    recurse: bool = False
    include_hidden: bool = False
    report_which: ReportWhich = ReportWhich.ALL

    @classmethod
    def for_mode(cls, mode: TextMode, **kwargs) -> "ScanConfig":
        return cls(check_plain=mode.check_plain, check_trim=mode.check_trim, **kwargs)

    @property
    def text_type(self) -> str:
        if self.check_plain and not self.check_trim:
            return TEXT_PLAIN
        if self.check_trim and not self.check_plain:
            return TEXT_TRIM
        return TEXT_BOTH


def safe_is_dir(p: Path) -> bool:
    try:
        return p.is_dir()
    except OSError:
        return False

def safe_is_file(p: Path) -> bool:
    try:
        return p.is_file()
    except OSError:
        return False

def is_hidden(p: Path) -> bool:
    if p.name.startswith("."):
        return True
    # Windows keeps a separate hidden attribute
    try:
        attrs = getattr(os.lstat(p), "st_file_attributes", 0)
    except OSError:
        return False
    return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)

def save_target_problem(p: Path) -> Optional[str]:
    """Why 'p' cannot receive saved output, or None if it can."""
    if safe_is_dir(p):
        return f"{p.name} is a directory or folder.\nPlease select a normal file."
    if is_hidden(p):
        return f"{p.name} is a hidden or protected file.\nPlease select a normal file."
    return None

def sort_key(p: Path) -> Tuple[int, str, str]:
    # Files before folders, then case-insensitive name, then exact name
    name = p.name
    return (1 if safe_is_dir(p) else 0, name.lower(), name)

def sort_paths(paths: Iterable[Path]) -> List[Path]:
    return sorted(paths, key=sort_key)
