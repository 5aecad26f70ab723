from __future__ import annotations

from .upload_widget import DATA_FILE_ACCEPT, CancelToken, OnPathReady, UploadWidget

__all__ = [
    "DATA_FILE_ACCEPT",
    "UploadWidget",
    "CancelToken",
    "OnPathReady",
]
