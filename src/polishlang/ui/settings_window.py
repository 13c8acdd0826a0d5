import asyncio
from concurrent.futures import Future
from dataclasses import replace
from typing import Callable, Optional

from PySide6.QtCore import QThread, QTimer, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..core.providers import PROVIDERS
from ..core.settings.config import STATUS_DISPLAY_MS
from ..core.sync import FormState, SaveResult, SettingsSession
from ..utils.logger import get_logger

logger = get_logger(__name__)

_SAVE_LABEL = "Save Settings"


class _EventLoopThread(QThread):
    """Background thread running the asyncio loop that session calls execute on."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._loop = asyncio.new_event_loop()

    def run(self):
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()

    def submit(self, coro) -> Future:
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def stop(self) -> None:
        if self.isRunning():
            self._loop.call_soon_threadsafe(self._loop.stop)
            self.wait()


class SettingsWindow(QWidget):

    saved = Signal(object)  # Settings
    # (callback, result, error) delivered from the loop thread to the UI thread
    _task_done = Signal(object, object, object)

    def __init__(self, session: SettingsSession, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Polish Language Settings")
        self._session = session
        self._form: Optional[FormState] = None

        self._runner = _EventLoopThread(self)
        self._runner.start()
        self._task_done.connect(self._on_task_done)

        self._setup_ui()
        self._set_busy(True)
        self._run(self._session.start(), self._on_loaded)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        shortcut_group = QGroupBox("Shortcuts")
        shortcut_layout = QFormLayout(shortcut_group)
        self._shortcut_edit = QLineEdit()
        self._shortcut_edit.setPlaceholderText("e.g. CmdOrCtrl+Alt+P")
        shortcut_layout.addRow("Polish text:", self._shortcut_edit)
        self._translate_shortcut_edit = QLineEdit()
        self._translate_shortcut_edit.setPlaceholderText("e.g. CmdOrCtrl+Alt+T")
        shortcut_layout.addRow("Translate text:", self._translate_shortcut_edit)
        layout.addWidget(shortcut_group)

        provider_group = QGroupBox("AI Provider")
        provider_layout = QFormLayout(provider_group)

        self._provider_combo = QComboBox()
        for provider in PROVIDERS.values():
            self._provider_combo.addItem(provider.name, provider.id)
        self._provider_combo.currentIndexChanged.connect(self._on_provider_changed)
        provider_layout.addRow("Provider:", self._provider_combo)

        self._api_key_edit = QLineEdit()
        self._api_key_edit.setEchoMode(QLineEdit.Password)
        provider_layout.addRow("API Key:", self._api_key_edit)

        self._model_combo = QComboBox()
        self._model_combo.setMinimumWidth(250)
        provider_layout.addRow("Model:", self._model_combo)

        self._base_url_edit = QLineEdit()
        provider_layout.addRow("API Base URL:", self._base_url_edit)
        layout.addWidget(provider_group)

        prompt_group = QGroupBox("Prompt")
        prompt_layout = QVBoxLayout(prompt_group)
        self._prompt_edit = QPlainTextEdit()
        self._prompt_edit.setPlaceholderText(
            "Instructions sent to the model with the selected text"
        )
        prompt_layout.addWidget(self._prompt_edit)
        layout.addWidget(prompt_group)

        feedback_group = QGroupBox("Feedback")
        feedback_layout = QVBoxLayout(feedback_group)
        self._sound_cb = QCheckBox("Play a sound when text is ready")
        feedback_layout.addWidget(self._sound_cb)
        self._notifications_cb = QCheckBox("Show notifications")
        feedback_layout.addWidget(self._notifications_cb)
        layout.addWidget(feedback_group)

        self._status_label = QLabel()
        self._status_label.setWordWrap(True)
        self._status_label.hide()
        layout.addWidget(self._status_label)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        self._save_btn = QPushButton(_SAVE_LABEL)
        self._save_btn.clicked.connect(self._on_save_clicked)
        btn_layout.addWidget(self._save_btn)
        layout.addLayout(btn_layout)

    # --- Session calls ---

    def _run(self, coro, callback: Callable[[object], None]) -> None:
        future = self._runner.submit(coro)

        def _done(fut: Future) -> None:
            error = fut.exception()
            self._task_done.emit(callback, None if error else fut.result(), error)

        future.add_done_callback(_done)

    def _on_task_done(self, callback, result, error) -> None:
        if error is not None:
            logger.error(f"Settings operation failed: {error}", exc_info=error)
            self._show_status(f"Unexpected error: {error}", is_error=True)
            if self._form is not None:
                self._apply_form(self._form)
            self._set_busy(False)
            return
        callback(result)

    def _on_loaded(self, form: FormState) -> None:
        self._apply_form(form)
        self._set_busy(False)
        if self._session.load_error is not None:
            self._show_status(
                f"Could not load settings, using defaults: {self._session.load_error}",
                is_error=True,
            )

    def _on_provider_changed(self, index: int) -> None:
        provider_id = self._provider_combo.itemData(index)
        if self._form is None or not provider_id or provider_id == self._form.provider:
            return
        form = self._collect_form()
        self._set_busy(True)
        self._run(self._session.switch_provider(provider_id, form), self._on_switched)

    def _on_switched(self, form: FormState) -> None:
        self._apply_form(form)
        self._set_busy(False)

    def _on_save_clicked(self) -> None:
        if self._form is None:
            return
        self._form = self._collect_form()
        self._set_busy(True)
        self._save_btn.setText("Saving...")
        self._run(self._session.save(self._form), self._on_saved)

    def _on_saved(self, result: SaveResult) -> None:
        if result.ok:
            self._show_status("Settings saved successfully!")
            self.saved.emit(result.snapshot)
        else:
            self._show_status(f"Failed to save settings: {result.error}", is_error=True)
        self._set_busy(False)

    # --- Form <-> widgets ---

    def _apply_form(self, form: FormState) -> None:
        self._form = form

        self._provider_combo.blockSignals(True)
        idx = self._provider_combo.findData(form.provider)
        if idx >= 0:
            self._provider_combo.setCurrentIndex(idx)
        self._provider_combo.blockSignals(False)

        self._model_combo.clear()
        for option in form.model_options:
            self._model_combo.addItem(option.label, option.id)
        idx = self._model_combo.findData(form.model)
        self._model_combo.setCurrentIndex(idx)

        self._shortcut_edit.setText(form.shortcut)
        self._translate_shortcut_edit.setText(form.translate_shortcut)
        self._api_key_edit.setText(form.api_key)
        self._api_key_edit.setPlaceholderText(form.api_key_placeholder)
        self._base_url_edit.setText(form.base_url)
        self._prompt_edit.setPlainText(form.prompt)
        self._sound_cb.setChecked(form.sound_enabled)
        self._notifications_cb.setChecked(form.notifications_enabled)

    def _collect_form(self) -> FormState:
        # provider stays the one whose credential is on screen, not the combo's
        return replace(
            self._form,
            shortcut=self._shortcut_edit.text().strip(),
            translate_shortcut=self._translate_shortcut_edit.text().strip(),
            api_key=self._api_key_edit.text().strip(),
            model=self._model_combo.currentData(),
            base_url=self._base_url_edit.text().strip(),
            prompt=self._prompt_edit.toPlainText(),
            sound_enabled=self._sound_cb.isChecked(),
            notifications_enabled=self._notifications_cb.isChecked(),
        )

    def _set_busy(self, busy: bool) -> None:
        self._provider_combo.setEnabled(not busy)
        self._save_btn.setEnabled(not busy)
        if not busy:
            self._save_btn.setText(_SAVE_LABEL)

    def _show_status(self, message: str, is_error: bool = False) -> None:
        color = "#dc3545" if is_error else "#28a745"
        self._status_label.setStyleSheet(f"color: {color};")
        self._status_label.setText(message)
        self._status_label.show()
        QTimer.singleShot(STATUS_DISPLAY_MS, self._status_label.hide)

    def shutdown(self) -> None:
        """Stop the background event loop. Safe to call more than once."""
        self._runner.stop()

    def closeEvent(self, event) -> None:
        self.shutdown()
        super().closeEvent(event)
