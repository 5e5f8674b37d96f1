from __future__ import annotations

import codecs
import locale
import logging
import threading
from encodings.aliases import aliases
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .constants import LOCAL_ENCODING, RAW_ENCODING, READ_BLOCK_SIZE
from .models import ClassificationResult, Outcome

log = logging.getLogger(__name__)

LINE_BREAKS = (0x0A, 0x0D)
BLANKS = (0x09, 0x20, 0x3000)
# NUL and DEL do not cancel pending trailing white space
TRANSPARENT = (0x00, 0x7F)


class UnsupportedEncoding(LookupError):
    def __init__(self, name: str):
        super().__init__(f"Unsupported character set: {name!r}")
        self.name = name


def resolve_encoding(name: str) -> Optional[str]:
    """Map an encoding selector to a codec name, or None for raw bytes."""
    if name == LOCAL_ENCODING:
        return locale.getpreferredencoding(False)
    if name == RAW_ENCODING:
        return None
    try:
        info = codecs.lookup(name)
    except LookupError:
        raise UnsupportedEncoding(name) from None
    # base64, rot13 and friends are codecs but not text encodings
    if not getattr(info, "_is_text_encoding", True):
        raise UnsupportedEncoding(name)
    return info.name


def available_encodings() -> List[str]:
    names = set()
    for alias in set(aliases.values()):
        try:
            info = codecs.lookup(alias)
        except LookupError:
            continue
        if getattr(info, "_is_text_encoding", True):
            names.add(info.name)
    return sorted(names, key=str.lower)


class UnitScanner:
    """Single pass state machine over bytes or decoded code points."""

    def __init__(self, check_plain: bool, check_trim: bool):
        self.check_plain = check_plain
        self.check_trim = check_trim
        self.bad_char: Optional[int] = None
        self.found_space = False
        self.white_pending = False

    @property
    def done(self) -> bool:
        plain_done = not self.check_plain or self.bad_char is not None
        trim_done = not self.check_trim or self.found_space
        return plain_done and trim_done

    def feed(self, units: Iterable[int]) -> bool:
        """Consume units until both checks have failed. Returns True when done."""
        if self.done:
            return True
        for ch in units:
            if ch in LINE_BREAKS:
                if self.white_pending:
                    self.found_space = True
                self.white_pending = False
            elif ch in BLANKS:
                self.white_pending = self.check_trim
            elif 0x21 <= ch <= 0x7E:
                self.white_pending = False
            else:
                if self.check_plain and self.bad_char is None:
                    self.bad_char = ch
                if ch not in TRANSPARENT:
                    self.white_pending = False
            if self.done:
                return True
        return False

    def finish(self) -> None:
        # file ends with white space and no line break
        if self.white_pending:
            self.found_space = True
        self.white_pending = False

    def outcome(self) -> Outcome:
        if self.bad_char is not None and self.found_space:
            return Outcome.BOTH
        if self.bad_char is not None:
            return Outcome.INVALID_CHARACTER
        if self.found_space:
            return Outcome.TRAILING_WHITESPACE
        return Outcome.CORRECT


def _scan_stream(handle, scanner: UnitScanner, text: bool, cancel: Optional[threading.Event]) -> bool:
    """Read blocks into the scanner. Returns False if cancelled part way."""
    while not scanner.done:
        if cancel is not None and cancel.is_set():
            return False
        block = handle.read(READ_BLOCK_SIZE)
        if not block:
            break
        scanner.feed(map(ord, block) if text else block)
    return True


def classify_file(
    path: Union[str, Path],
    encoding: str,
    check_plain: bool = True,
    check_trim: bool = True,
    cancel: Optional[threading.Event] = None,
) -> ClassificationResult:
    name = str(path)
    try:
        codec = resolve_encoding(encoding)
    except UnsupportedEncoding as e:
        log.error("%s", e)
        return ClassificationResult(path=name, outcome=Outcome.ENCODING_ERROR, message=str(e))

    scanner = UnitScanner(check_plain, check_trim)
    try:
        if codec is None:
            with open(path, "rb") as fh:
                completed = _scan_stream(fh, scanner, False, cancel)
        else:
            # newline="" keeps CR and LF as they are in the file
            with open(path, "r", encoding=codec, errors="replace", newline="") as fh:
                completed = _scan_stream(fh, scanner, True, cancel)
    except OSError as e:
        log.debug("Read failed for %s: %s", name, e)
        return ClassificationResult(path=name, outcome=Outcome.IO_ERROR, message=e.strerror or str(e))

    if not completed or (cancel is not None and cancel.is_set()):
        return ClassificationResult(path=name, outcome=Outcome.CANCELLED)
    scanner.finish()
    return ClassificationResult(
        path=name,
        outcome=scanner.outcome(),
        bad_char=scanner.bad_char,
        trailing_space=scanner.found_space,
    )
