from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QSettings, QThread, QTimer
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QApplication,
    QButtonGroup,
    QCheckBox,
    QComboBox,
    QFileDialog,
    QFontComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from .classifier import available_encodings
from .constants import (
    APP_NAME,
    DEFAULT_FONT_SIZE,
    FONT_SIZES,
    LOCAL_ENCODING,
    ORG_NAME,
    PROGRAM_TITLE,
    RAW_ENCODING,
    STATUS_INTERVAL_MS,
    SUFFIX_DEFAULT,
)
from .models import ReportWhich, TextMode, WalkTotals
from .pathrules import ScanConfig, SuffixFilter, save_target_problem, sort_paths
from .worker import ScanWorker

SHOW_CHOICES = [
    ("show all files", ReportWhich.ALL),
    ("show correct only", ReportWhich.SUCCESS_ONLY),
    ("show errors only", ReportWhich.FAILURE_ONLY),
]


def _to_bool(value, default: bool) -> bool:
    # QSettings hands back strings on some platforms
    if value is None:
        return default
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class MainWindow(QMainWindow):
    def __init__(self, font_size: Optional[int] = None):
        super().__init__()
        self.setWindowTitle(PROGRAM_TITLE)
        self.settings = QSettings(ORG_NAME, APP_NAME)
        self.resize(900, 600)

        self._font_size = font_size or int(self.settings.value("font_size", DEFAULT_FONT_SIZE))
        self._status_pending = ""
        self._scan_thread: Optional[QThread] = None
        self._scan_worker: Optional[ScanWorker] = None

        self._status_timer = QTimer(self)
        self._status_timer.setInterval(STATUS_INTERVAL_MS)
        self._status_timer.timeout.connect(self._on_status_tick)

        self._build_ui()
        self._restore_settings()

    def _build_ui(self):
        # Action buttons
        actions = QWidget()
        actions_l = QHBoxLayout(actions)
        self.btn_open = QPushButton("Open Files…")
        self.btn_open.setToolTip("Start checking files.")
        self.btn_open.clicked.connect(self._open_files)
        self.btn_open_folder = QPushButton("Open Folder…")
        self.btn_open_folder.setToolTip("Start checking a folder.")
        self.btn_open_folder.clicked.connect(self._open_folder)
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.setToolTip("Stop checking files.")
        self.btn_cancel.setEnabled(False)
        self.btn_cancel.clicked.connect(self._cancel_scan)
        self.btn_save = QPushButton("Save Output…")
        self.btn_save.setToolTip("Copy output text to a file.")
        self.btn_save.clicked.connect(self._save_output)
        btn_exit = QPushButton("Exit")
        btn_exit.setToolTip("Close this program.")
        btn_exit.clicked.connect(self.close)
        actions_l.addWidget(self.btn_open)
        actions_l.addWidget(self.btn_open_folder)
        actions_l.addStretch(1)
        actions_l.addWidget(self.btn_cancel)
        actions_l.addWidget(self.btn_save)
        actions_l.addStretch(1)
        actions_l.addWidget(btn_exit)

        # File types
        suffix_row = QWidget()
        suffix_l = QHBoxLayout(suffix_row)
        self.chk_suffix = QCheckBox("Look for files with these file types or suffixes:")
        self.suffix_edit = QLineEdit(SUFFIX_DEFAULT)
        self.suffix_edit.textEdited.connect(lambda _t: self.chk_suffix.setChecked(True))
        suffix_l.addWidget(self.chk_suffix)
        suffix_l.addWidget(self.suffix_edit, 1)

        # Character set
        enc_row = QWidget()
        enc_l = QHBoxLayout(enc_row)
        self.chk_encoding = QCheckBox("Read files using this character set or text encoding:")
        self.encoding_combo = QComboBox()
        self.encoding_combo.setEditable(True)
        self.encoding_combo.addItem(LOCAL_ENCODING)
        self.encoding_combo.addItem(RAW_ENCODING)
        self.encoding_combo.addItems(available_encodings())
        self.encoding_combo.setToolTip("Select name of character set encoding for reading files.")
        self.encoding_combo.activated.connect(lambda _i: self.chk_encoding.setChecked(True))
        enc_l.addWidget(self.chk_encoding)
        enc_l.addWidget(self.encoding_combo, 1)

        # Text types
        mode_row = QWidget()
        mode_l = QHBoxLayout(mode_row)
        self.mode_group = QButtonGroup(self)
        for mode, label in (
            (TextMode.PLAIN, "Check for plain text only,"),
            (TextMode.TRIM, "trimmed text only, or"),
            (TextMode.BOTH, "both plain and trimmed text."),
        ):
            rb = QRadioButton(label)
            self.mode_group.addButton(rb, mode.value)
            mode_l.addWidget(rb)
        self.mode_group.button(TextMode.BOTH.value).setChecked(True)
        mode_l.addStretch(1)

        # Font, subfolders, hidden, show
        misc_row = QWidget()
        misc_l = QHBoxLayout(misc_row)
        self.font_combo = QFontComboBox()
        self.font_combo.setToolTip("Font name for output text.")
        self.font_combo.currentFontChanged.connect(lambda _f: self._apply_font())
        self.size_combo = QComboBox()
        sizes = sorted(set(FONT_SIZES) | {str(self._font_size)}, key=int)
        self.size_combo.addItems(sizes)
        self.size_combo.setCurrentText(str(self._font_size))
        self.size_combo.setToolTip("Point size for output text.")
        self.size_combo.currentTextChanged.connect(lambda _t: self._apply_font())
        self.chk_recurse = QCheckBox("search subfolders")
        self.chk_recurse.setToolTip("Select to search folders and subfolders.")
        self.chk_hidden = QCheckBox("include hidden files")
        self.show_combo = QComboBox()
        for label, which in SHOW_CHOICES:
            self.show_combo.addItem(label, which.value)
        self.show_combo.setToolTip("Select which files to report.")
        misc_l.addWidget(self.font_combo)
        misc_l.addWidget(self.size_combo)
        misc_l.addStretch(1)
        misc_l.addWidget(self.chk_recurse)
        misc_l.addWidget(self.chk_hidden)
        misc_l.addStretch(1)
        misc_l.addWidget(self.show_combo)

        self.output = QPlainTextEdit()
        self.output.setReadOnly(True)
        self.output.setPlaceholderText(
            "Checks if files are plain text (ASCII) and do not have trailing spaces or tabs.\n"
            "Choose your options; then open files or folders to search."
        )

        self.status_label = QLabel("")

        central = QWidget()
        main_l = QVBoxLayout(central)
        main_l.addWidget(actions)
        main_l.addWidget(suffix_row)
        main_l.addWidget(enc_row)
        main_l.addWidget(mode_row)
        main_l.addWidget(misc_row)
        main_l.addWidget(self.output, 1)
        main_l.addWidget(self.status_label)
        self.setCentralWidget(central)

    def _restore_settings(self):
        s = self.settings
        self.suffix_edit.setText(str(s.value("suffixes", SUFFIX_DEFAULT)))
        self.chk_suffix.setChecked(_to_bool(s.value("suffix_enabled"), False))
        self.encoding_combo.setCurrentText(str(s.value("encoding", LOCAL_ENCODING)))
        self.chk_encoding.setChecked(_to_bool(s.value("encoding_enabled"), False))
        mode = int(s.value("mode", TextMode.BOTH.value))
        btn = self.mode_group.button(mode)
        if btn is not None:
            btn.setChecked(True)
        self.chk_recurse.setChecked(_to_bool(s.value("recurse"), False))
        self.chk_hidden.setChecked(_to_bool(s.value("hidden"), False))
        idx = self.show_combo.findData(str(s.value("show", ReportWhich.ALL.value)))
        self.show_combo.setCurrentIndex(max(idx, 0))
        family = s.value("font_family", "")
        if family:
            self.font_combo.setCurrentFont(QFont(str(family)))
        self._apply_font()

    def _save_settings(self):
        s = self.settings
        s.setValue("suffixes", self.suffix_edit.text())
        s.setValue("suffix_enabled", self.chk_suffix.isChecked())
        s.setValue("encoding", self.encoding_combo.currentText())
        s.setValue("encoding_enabled", self.chk_encoding.isChecked())
        s.setValue("mode", self.mode_group.checkedId())
        s.setValue("recurse", self.chk_recurse.isChecked())
        s.setValue("hidden", self.chk_hidden.isChecked())
        s.setValue("show", self.show_combo.currentData())
        s.setValue("font_family", self.font_combo.currentFont().family())
        s.setValue("font_size", self.size_combo.currentText())

    def _apply_font(self):
        try:
            size = int(self.size_combo.currentText())
        except ValueError:
            size = DEFAULT_FONT_SIZE
        font = QFont(self.font_combo.currentFont().family(), size)
        self.output.setFont(font)

    def _current_config(self) -> ScanConfig:
        if self.chk_encoding.isChecked():
            encoding = self.encoding_combo.currentText().strip() or LOCAL_ENCODING
        else:
            encoding = LOCAL_ENCODING
        suffix_filter = SuffixFilter.parse(self.suffix_edit.text(), enabled=self.chk_suffix.isChecked())
        return ScanConfig.for_mode(
            TextMode(self.mode_group.checkedId()),
            encoding=encoding,
            suffix_filter=suffix_filter,
            recurse=self.chk_recurse.isChecked(),
            include_hidden=self.chk_hidden.isChecked(),
            report_which=ReportWhich(self.show_combo.currentData()),
        )

    def _open_files(self):
        names, _ = QFileDialog.getOpenFileNames(self, "Open Files…", str(Path.home()))
        if names:
            self._start_scan([Path(n) for n in names])

    def _open_folder(self):
        d = QFileDialog.getExistingDirectory(self, "Open Folder…", str(Path.home()))
        if d:
            self._start_scan([Path(d)])

    def _start_scan(self, paths: List[Path]):
        self._save_settings()
        config = self._current_config()

        self.output.clear()
        self._set_running(True)
        self._status_pending = ""
        self.status_label.setText("")
        self._status_timer.start()

        self._scan_thread = QThread()
        self._scan_worker = ScanWorker(paths=sort_paths(paths), config=config)
        self._scan_worker.moveToThread(self._scan_thread)
        self._scan_thread.started.connect(self._scan_worker.run)
        self._scan_worker.line.connect(self._put_output)
        self._scan_worker.status.connect(self._on_status)
        self._scan_worker.finished.connect(self._on_scan_finished)
        self._scan_worker.failed.connect(self._on_scan_failed)
        self._scan_thread.start()

    def _cancel_scan(self):
        if self._scan_worker:
            self._scan_worker.cancel()
            self._put_output("Cancelled by user.")
        self.btn_cancel.setEnabled(False)

    def _put_output(self, text: str):
        self.output.appendPlainText(text)

    def _on_status(self, text: str):
        self._status_pending = text

    def _on_status_tick(self):
        if self.status_label.text() != self._status_pending:
            self.status_label.setText(self._status_pending)

    def _on_scan_finished(self, totals: WalkTotals):
        self._stop_thread()
        self._set_running(False)

    def _on_scan_failed(self, err: str):
        self._stop_thread()
        self._set_running(False)
        QMessageBox.critical(self, "Check failed", err)

    def _stop_thread(self):
        self._status_timer.stop()
        self.status_label.setText("")
        if self._scan_thread:
            self._scan_thread.quit()
            self._scan_thread.wait()
        self._scan_thread = None
        self._scan_worker = None

    def _set_running(self, running: bool):
        self.btn_open.setEnabled(not running)
        self.btn_open_folder.setEnabled(not running)
        self.btn_cancel.setEnabled(running)

    def _save_output(self):
        name, _ = QFileDialog.getSaveFileName(self, "Save Output as Text File…", str(Path.home()))
        if not name:
            return
        target = Path(name)
        problem = save_target_problem(target)
        if problem:
            QMessageBox.information(self, "Save Output", problem)
            return
        try:
            target.write_text(self.output.toPlainText() + "\n", encoding="utf-8")
        except OSError as e:
            self._put_output(f"Can't write to text file: {e}")

    def closeEvent(self, event):
        if self._scan_worker:
            self._scan_worker.cancel()
        if self._scan_thread:
            self._scan_thread.quit()
            self._scan_thread.wait()
        self._save_settings()
        super().closeEvent(event)


def run_gui(font_size: Optional[int] = None) -> int:
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(ORG_NAME)
    if font_size:
        app.setFont(QFont(app.font().family(), font_size))
    w = MainWindow(font_size=font_size)
    w.show()
    return app.exec()
