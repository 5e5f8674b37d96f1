from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    CORRECT = "Correct"
    INVALID_CHARACTER = "InvalidCharacter"
    TRAILING_WHITESPACE = "TrailingWhitespace"
    BOTH = "Both"
    ENCODING_ERROR = "EncodingError"
    IO_ERROR = "IOError"
    CANCELLED = "Cancelled"


class ReportWhich(str, Enum):
    ALL = "all"
    SUCCESS_ONLY = "correct"
    FAILURE_ONLY = "errors"

    @property
    def show_success(self) -> bool:
        return self in (ReportWhich.ALL, ReportWhich.SUCCESS_ONLY)

    @property
    def show_failure(self) -> bool:
        return self in (ReportWhich.ALL, ReportWhich.FAILURE_ONLY)

    @property
    def show_other(self) -> bool:
        return self is ReportWhich.ALL


class TextMode(int, Enum):
    PLAIN = 1
    TRIM = 2
    BOTH = 3

    @property
    def check_plain(self) -> bool:
        return self in (TextMode.PLAIN, TextMode.BOTH)

    @property
    def check_trim(self) -> bool:
        return self in (TextMode.TRIM, TextMode.BOTH)


class CompletionStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    UNKNOWN = "unknown"


@dataclass
class ClassificationResult:
    path: str
    outcome: Outcome
    bad_char: Optional[int] = None
    trailing_space: bool = False
    message: Optional[str] = None

    @property
    def is_correct(self) -> bool:
        return self.outcome is Outcome.CORRECT

    @property
    def is_error(self) -> bool:
        return self.outcome not in (Outcome.CORRECT, Outcome.CANCELLED)


@dataclass
class WalkTotals:
    files: int = 0
    folders: int = 0
    correct: int = 0
    errors: int = 0

    @property
    def status(self) -> CompletionStatus:
        if self.errors > 0:
            return CompletionStatus.FAILURE
        if self.correct > 0:
            return CompletionStatus.SUCCESS
        return CompletionStatus.UNKNOWN
