from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from nicegui import ui

from facestats.upload_widget.normalize import (
    is_normalize_temp_file,
    normalize_uploaded_file,
    safe_upload_file_summary,
)
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

# Accept string for the file picker: CSV and Excel workbooks.
DATA_FILE_ACCEPT = ".csv,.xlsx,text/csv,application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class CancelToken:
    """Cooperative cancellation token for post-upload processing."""
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


# Public type aliases (stable API)
OnPathReady = Callable[[Path, CancelToken], Awaitable[None]]


class UploadWidget:
    """Single-file NiceGUI upload that hands an on-disk path to a callback.

    Each upload gets a fresh CancelToken; Cancel only affects the upload
    currently being processed. Temp files made while normalizing the upload
    are deleted after on_path_ready returns, so the callback must finish
    reading the path before it returns.
    """

    def __init__(
        self,
        *,
        label: str,
        on_path_ready: OnPathReady,
        accept: str = DATA_FILE_ACCEPT,
    ) -> None:
        self._label = label
        self._accept = accept
        self._on_path_ready = on_path_ready
        self._cancel = CancelToken()

        self._build()

    def _build(self) -> None:
        """Build the NiceGUI UI. Must be called within a NiceGUI slot."""
        self._upload = ui.upload(
            label=self._label,
            auto_upload=True,
            multiple=False,
            on_upload=self._on_upload,
        ).props(
            f'accept="{self._accept}" max-files="1"'
        ).classes("w-full")

        with ui.row().classes("items-center gap-2"):
            self._spinner = ui.spinner(size="lg")
            self._spinner.visible = False
            self._status = ui.label("").classes("text-sm text-gray-600")
            ui.button("Cancel", on_click=self.cancel).props("outline")

    def cancel(self) -> None:
        self._cancel.cancel()
        self._status.text = "Cancelled"
        self._spinner.visible = False
        logger.info("cancel requested")

    def _set_status(self, msg: str) -> None:
        self._status.text = msg

    async def _on_upload(self, e: Any) -> None:
        upload_file = getattr(e, "file", None)
        if upload_file is None:
            logger.warning("on_upload called without a file")
            return

        cancel = CancelToken()
        self._cancel = cancel
        name = getattr(upload_file, "name", "<unnamed>")
        path: Optional[Path] = None

        self._spinner.visible = True
        self._set_status(f"Received {name}")
        try:
            try:
                path = await normalize_uploaded_file(upload_file)
            except Exception:
                logger.exception("upload normalize failed: %s", safe_upload_file_summary(upload_file))
                self._set_status(f"Could not read {name}")
                return
            logger.debug("normalized %s -> %s", name, path)

            if cancel.cancelled:
                logger.info("upload %s: cancelled before processing", name)
                return

            self._set_status(f"Loading {name}")
            try:
                await self._on_path_ready(path, cancel)
            except Exception:
                logger.exception("on_path_ready failed for %s", name)
                self._set_status(f"Failed to load {name}")
                return
            if not cancel.cancelled:
                self._set_status(f"Loaded {name}")
        finally:
            self._spinner.visible = False
            if path is not None:
                self._discard_temp(path, upload_file)
            reset = getattr(self._upload, "reset", None)
            if callable(reset):
                reset()

    def _discard_temp(self, path: Path, upload_file: Any) -> None:
        if not is_normalize_temp_file(path, upload_file):
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("could not remove temp upload %s: %s", path, e)
        else:
            logger.debug("removed temp upload %s", path)
