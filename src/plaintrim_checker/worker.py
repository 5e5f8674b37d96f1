from __future__ import annotations

import threading
from pathlib import Path
from typing import List

from PyQt6.QtCore import QObject, pyqtSignal

from .engine import run_scan
from .pathrules import ScanConfig


class ScanWorker(QObject):
    line = pyqtSignal(str)
    status = pyqtSignal(str)
    finished = pyqtSignal(object)  # WalkTotals
    failed = pyqtSignal(str)

    def __init__(self, paths: List[Path], config: ScanConfig):
        super().__init__()
        self.paths = paths
        self.config = config
        self._cancel = threading.Event()

    def cancel(self):
        self._cancel.set()

    def run(self):
        try:
            totals = run_scan(
                self.paths,
                self.config,
                self.line.emit,
                cancel=self._cancel,
                on_status=self.status.emit,
            )
            self.finished.emit(totals)
        except Exception as e:
            self.failed.emit(str(e))
