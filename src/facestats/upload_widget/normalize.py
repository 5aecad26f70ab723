"""Upload normalization utilities for NiceGUI.

NiceGUI's ``ui.upload`` yields an event whose ``e.file`` is one of:

- **LargeFileUpload**: already written to disk; exposes ``._path``.
- **SmallFileUpload**: in-memory; exposes async ``.save(path)`` / ``.read()``
  or internal ``._data``.

``normalize_uploaded_file`` turns either into an on-disk ``pathlib.Path`` that
``facestats.dataset.ingest.load_dataset`` can read. The original file suffix
(``.csv`` / ``.xlsx``) is preserved because ingestion dispatches on it.

Temp files it creates carry TEMP_PREFIX; ``is_normalize_temp_file`` tells them
apart from an upload's own ``_path``. UploadWidget deletes them once its
``on_path_ready`` callback has returned.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional

TEMP_PREFIX = "facestats_upload_"

# content-type fragment -> suffix, for uploads that carry no file name
_CONTENT_TYPE_SUFFIXES = (
    ("spreadsheetml", ".xlsx"),
    ("csv", ".csv"),
    ("text/plain", ".csv"),
)


def _as_path(value: Any) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value:
        return Path(value)
    return None


def infer_suffix(upload_file: Any, *, suffix_hint: str | None = None) -> str:
    """Suffix (with leading dot, lower case) for the uploaded file, or ''."""
    if isinstance(suffix_hint, str) and suffix_hint:
        return suffix_hint.lower()

    name = getattr(upload_file, "name", None)
    if isinstance(name, str) and name:
        suf = Path(name).suffix
        if suf:
            return suf.lower()

    ctype = getattr(upload_file, "content_type", None)
    if isinstance(ctype, str):
        lc = ctype.lower()
        for fragment, suffix in _CONTENT_TYPE_SUFFIXES:
            if fragment in lc:
                return suffix

    return ""


def safe_upload_file_summary(upload_file: Any) -> str:
    """One-line summary of an upload object without dumping its bytes."""
    cls = type(upload_file).__name__
    name = getattr(upload_file, "name", None)
    ctype = getattr(upload_file, "content_type", None)

    p = _as_path(getattr(upload_file, "_path", None))
    has_path = bool(p and p.exists())

    data = getattr(upload_file, "_data", None)
    data_len = len(data) if isinstance(data, (bytes, bytearray)) else None

    return f"{cls}(name={name!r}, content_type={ctype!r}, has_path={has_path}, data_len={data_len})"


def is_normalize_temp_file(path: Path, upload_file: Any) -> bool:
    """True if path is a temp copy made by normalize_uploaded_file for upload_file."""
    if not path.name.startswith(TEMP_PREFIX):
        return False
    own = _as_path(getattr(upload_file, "_path", None))
    return own is None or own != path


def _mk_temp_path(*, suffix: str) -> Path:
    f = tempfile.NamedTemporaryFile(prefix=TEMP_PREFIX, suffix=suffix, delete=False)
    try:
        return Path(f.name)
    finally:
        f.close()


async def normalize_uploaded_file(upload_file: Any, *, suffix_hint: str | None = None) -> Path:
    """Normalize a NiceGUI upload file object into a readable filesystem Path.

    Order:
      1) ``._path`` on disk: returned as is when it has the right suffix,
         otherwise copied to a temp file with the inferred suffix
      2) async ``save(path)`` into a temp file
      3) async ``read()`` bytes into a temp file
      4) ``._data`` bytes into a temp file

    Raises:
        RuntimeError: If the object offers none of these interfaces.
    """
    suffix = infer_suffix(upload_file, suffix_hint=suffix_hint)

    p = _as_path(getattr(upload_file, "_path", None))
    if p is not None and p.exists():
        if not suffix or p.suffix.lower() == suffix:
            return p
        dst = _mk_temp_path(suffix=suffix)
        shutil.copyfile(p, dst)
        return dst

    save = getattr(upload_file, "save", None)
    if callable(save):
        tmp_path = _mk_temp_path(suffix=suffix)
        try:
            res = save(tmp_path)
            if hasattr(res, "__await__"):
                await res
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        if tmp_path.exists():
            return tmp_path

    read = getattr(upload_file, "read", None)
    if callable(read):
        data = read()
        if hasattr(data, "__await__"):
            data = await data
        if isinstance(data, (bytes, bytearray)):
            tmp_path = _mk_temp_path(suffix=suffix)
            tmp_path.write_bytes(bytes(data))
            return tmp_path

    raw = getattr(upload_file, "_data", None)
    if isinstance(raw, (bytes, bytearray)):
        tmp_path = _mk_temp_path(suffix=suffix)
        tmp_path.write_bytes(bytes(raw))
        return tmp_path

    raise RuntimeError(
        f"Upload is not readable: {safe_upload_file_summary(upload_file)}"
    )
