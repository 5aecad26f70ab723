# tests/upload_widget/test_normalize.py
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from facestats.upload_widget.normalize import (
    TEMP_PREFIX,
    infer_suffix,
    normalize_uploaded_file,
    safe_upload_file_summary,
)


class FakeLargeFileUpload:
    def __init__(self, path: Path, name: str | None = None) -> None:
        self._path = path
        self.name = name if name is not None else path.name
        self.content_type = "text/csv"


class FakeSmallFileUploadSave:
    def __init__(self, data: bytes, name: str = "x.csv") -> None:
        self._data = data
        self.name = name
        self.content_type = "text/csv"

    async def save(self, path: Path) -> None:
        Path(path).write_bytes(self._data)


class FakeSmallFileUploadRead:
    def __init__(self, data: bytes, name: str = "y.xlsx") -> None:
        self._data = data
        self.name = name
        self.content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    async def read(self) -> bytes:
        return self._data


class FakeSmallFileUploadDataOnly:
    def __init__(self, data: bytes, name: str = "z.csv") -> None:
        self._data = data
        self.name = name
        self.content_type = "text/csv"


class FakeNoName:
    def __init__(self, content_type: str) -> None:
        self.name = ""
        self.content_type = content_type


class FakeUnreadable:
    name = "nothing.csv"
    content_type = "text/csv"


class FakeSaveFails:
    name = "broken.csv"
    content_type = "text/csv"

    async def save(self, path: Path) -> None:
        raise OSError("disk full")


def test_infer_suffix_prefers_hint_then_name_then_content_type() -> None:
    assert infer_suffix(FakeSmallFileUploadDataOnly(b"", name="a.CSV")) == ".csv"
    assert infer_suffix(FakeSmallFileUploadDataOnly(b"", name="a.csv"), suffix_hint=".XLSX") == ".xlsx"
    assert infer_suffix(FakeNoName("text/csv")) == ".csv"
    assert infer_suffix(FakeNoName("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")) == ".xlsx"
    assert infer_suffix(FakeNoName("application/octet-stream")) == ""


@pytest.mark.asyncio
async def test_normalize_largefileupload_returns_existing_path(tmp_path: Path) -> None:
    p = tmp_path / "a.csv"
    p.write_text("Date,X\n2024-01-01,1\n")
    up = FakeLargeFileUpload(p)

    out = await normalize_uploaded_file(up)

    assert out == p
    assert out.read_text() == "Date,X\n2024-01-01,1\n"


@pytest.mark.asyncio
async def test_normalize_largefileupload_copies_when_suffix_differs(tmp_path: Path) -> None:
    # NiceGUI spools large uploads to a temp file without the original suffix
    p = tmp_path / "upload_tmp"
    p.write_bytes(b"Date,X\n")
    up = FakeLargeFileUpload(p, name="prices.csv")

    out = await normalize_uploaded_file(up)

    assert out != p
    assert out.suffix == ".csv"
    assert out.name.startswith(TEMP_PREFIX)
    assert out.read_bytes() == b"Date,X\n"


@pytest.mark.asyncio
async def test_normalize_smallfileupload_save_writes_temp_file() -> None:
    data = b"Date,X\n2024-01-01,1\n"
    up = FakeSmallFileUploadSave(data, name="file.csv")

    out = await normalize_uploaded_file(up)

    assert out.exists()
    assert out.read_bytes() == data
    assert out.suffix == ".csv"


@pytest.mark.asyncio
async def test_normalize_smallfileupload_read_writes_temp_file() -> None:
    data = b"PK\x03\x04fake"
    up = FakeSmallFileUploadRead(data, name="book.xlsx")

    out = await normalize_uploaded_file(up)

    assert out.read_bytes() == data
    assert out.suffix == ".xlsx"


@pytest.mark.asyncio
async def test_normalize_smallfileupload_dataonly_writes_temp_file() -> None:
    data = b"rawdata"
    up = FakeSmallFileUploadDataOnly(data, name="raw.csv")

    out = await normalize_uploaded_file(up)

    assert out.read_bytes() == data
    assert out.suffix == ".csv"


@pytest.mark.asyncio
async def test_normalize_unreadable_upload_raises() -> None:
    with pytest.raises(RuntimeError, match="not readable"):
        await normalize_uploaded_file(FakeUnreadable())


@pytest.mark.asyncio
async def test_normalize_failed_save_removes_temp_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    with pytest.raises(OSError, match="disk full"):
        await normalize_uploaded_file(FakeSaveFails())
    assert list(tmp_path.glob(f"{TEMP_PREFIX}*")) == []


def test_safe_upload_file_summary_does_not_dump_bytes() -> None:
    s = safe_upload_file_summary(FakeSmallFileUploadDataOnly(b"x" * 1000, name="big.csv"))
    assert "big.csv" in s
    assert "data_len=1000" in s
    assert "xxxx" not in s
