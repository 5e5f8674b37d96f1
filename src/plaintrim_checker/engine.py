from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Union

from .classifier import classify_file
from .models import ClassificationResult, Outcome, WalkTotals
from .pathrules import ScanConfig, is_hidden, safe_is_dir, safe_is_file, sort_paths
from .report import format_result, format_summary

log = logging.getLogger(__name__)

PathArg = Union[str, os.PathLike]


def _canonical(path: Path) -> Path:
    try:
        return path.resolve()
    except (OSError, RuntimeError):
        return path

def _list_children(folder: Path) -> List[Path]:
    try:
        return list(folder.iterdir())
    except OSError as e:
        log.debug("Cannot list %s: %s", folder, e)
        return []


class TreeWalker:
    """Walks files and folders for one run and owns that run's totals."""

    def __init__(
        self,
        config: ScanConfig,
        emit: Callable[[str], None],
        cancel: Optional[threading.Event] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.emit = emit
        self.cancel = cancel if cancel is not None else threading.Event()
        self.on_status = on_status
        self.totals = WalkTotals()
        self._visited: Set[Path] = set()

    @property
    def cancelled(self) -> bool:
        return self.cancel.is_set()

    def walk_all(self, paths: Iterable[PathArg]) -> WalkTotals:
        given = list(paths)
        blanks = [p for p in given if not str(p).strip()]
        for _ in blanks:
            if self.cancelled:
                break
            self._not_found("")
        for p in sort_paths(Path(p) for p in given if str(p).strip()):
            if self.cancelled:
                break
            self.walk(p)
        return self.totals

    def walk(self, path: PathArg) -> None:
        if self.cancelled:
            return
        if not str(path).strip():
            self._not_found("")
            return
        canon = _canonical(Path(path))
        if self.on_status:
            self.on_status(str(canon))

        if safe_is_dir(canon):
            if canon in self._visited:
                # symlink back to a folder already searched in this run
                if self.config.report_which.show_other:
                    self.emit(f"{Path(path).name} - ignoring subfolder already searched")
                return
            self._visited.add(canon)
            self._walk_folder(canon)
        elif safe_is_file(canon):
            self._check_file(canon)
        else:
            self._not_found(canon.name or str(canon))

    def _walk_folder(self, folder: Path) -> None:
        show_other = self.config.report_which.show_other
        self.totals.folders += 1
        self.emit(f"Searching folder {folder}")
        for child in sort_paths(_list_children(folder)):
            if self.cancelled:
                return
            if not self.config.include_hidden and is_hidden(child):
                if show_other:
                    self.emit(f"{child.name} - ignoring hidden file or subfolder")
            elif safe_is_dir(child):
                if self.config.recurse:
                    self.walk(child)
                elif show_other:
                    self.emit(f"{child.name} - ignoring subfolder")
            elif safe_is_file(child):
                if self.config.suffix_filter.matches(child.name):
                    self.walk(child)
            # anything else vanished or is a special file; skip quietly

    def _check_file(self, path: Path) -> None:
        self.totals.files += 1
        result = classify_file(
            path,
            self.config.encoding,
            check_plain=self.config.check_plain,
            check_trim=self.config.check_trim,
            cancel=self.cancel,
        )
        self._record(path.name, result)

    def _record(self, name: str, result: ClassificationResult) -> None:
        if result.outcome is Outcome.CANCELLED:
            return
        which = self.config.report_which
        line = format_result(name, result, self.config)
        if result.outcome is Outcome.ENCODING_ERROR:
            self.emit(line)
            self.totals.errors += 1
            # nothing else can be read with this encoding
            self.cancel.set()
        elif result.outcome is Outcome.IO_ERROR:
            self.emit(line)
            self.totals.errors += 1
        elif result.is_correct:
            if which.show_success:
                self.emit(line)
            self.totals.correct += 1
        else:
            if which.show_failure:
                self.emit(line)
            self.totals.errors += 1

    def _not_found(self, name: str) -> None:
        self.emit(f"{name} - not a file or folder")
        self.totals.errors += 1


def run_scan(
    paths: Iterable[PathArg],
    config: ScanConfig,
    emit: Callable[[str], None],
    cancel: Optional[threading.Event] = None,
    on_status: Optional[Callable[[str], None]] = None,
) -> WalkTotals:
    """Walk every path in sorted order, then emit the summary line."""
    walker = TreeWalker(config, emit, cancel=cancel, on_status=on_status)
    try:
        walker.walk_all(paths)
    except KeyboardInterrupt:
        # Ctrl+C acts like the Cancel button
        walker.cancel.set()
        emit("Cancelled by user.")
    totals = walker.totals
    if walker.cancelled:
        log.info("Scan stopped early")
    emit(format_summary(totals))
    return totals
