from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

import facestats.upload_widget.upload_widget as uw_mod
from facestats.upload_widget.normalize import TEMP_PREFIX, is_normalize_temp_file
from facestats.upload_widget.upload_widget import CancelToken, DATA_FILE_ACCEPT, UploadWidget

pytestmark = pytest.mark.requires_nicegui


class _FakeElement:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.visible: bool = True

    def classes(self, *_args: Any, **_kwargs: Any) -> "_FakeElement":
        return self

    def props(self, *_args: Any, **_kwargs: Any) -> "_FakeElement":
        return self


class _FakeRow(_FakeElement):
    def __enter__(self) -> "_FakeRow":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


class _FakeUploadControl(_FakeElement):
    def __init__(
        self,
        *,
        label: str,
        auto_upload: bool,
        multiple: bool,
        on_upload: Callable[..., Any],
    ) -> None:
        super().__init__(text=label)
        self.label = label
        self.auto_upload = auto_upload
        self.multiple = multiple
        self.on_upload = on_upload
        self.props_string: str = ""
        self.reset_calls = 0

    def props(self, s: str) -> "_FakeUploadControl":
        self.props_string = s
        return self

    def reset(self) -> None:
        self.reset_calls += 1


class _FakeUI:
    def __init__(self) -> None:
        self.last_upload: Optional[_FakeUploadControl] = None
        self.buttons: dict[str, _FakeElement] = {}

    def label(self, text: str) -> _FakeElement:
        return _FakeElement(text=text)

    def spinner(self, size: str = "lg") -> _FakeElement:
        return _FakeElement(text=f"spinner:{size}")

    def row(self) -> _FakeRow:
        return _FakeRow()

    def button(self, text: str, on_click: Callable[..., Any]) -> _FakeElement:
        el = _FakeElement(text=text)
        el._on_click = on_click  # type: ignore[attr-defined]
        self.buttons[text] = el
        return el

    def upload(
        self,
        *,
        label: str,
        auto_upload: bool,
        multiple: bool,
        on_upload: Callable[..., Any],
    ) -> _FakeUploadControl:
        ctrl = _FakeUploadControl(
            label=label,
            auto_upload=auto_upload,
            multiple=multiple,
            on_upload=on_upload,
        )
        self.last_upload = ctrl
        return ctrl


@pytest.fixture()
def headless_ui(monkeypatch: pytest.MonkeyPatch) -> _FakeUI:
    fake_ui = _FakeUI()
    monkeypatch.setattr(uw_mod, "ui", fake_ui, raising=True)
    return fake_ui


@pytest.fixture()
def headless_widget_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, headless_ui: _FakeUI
) -> _FakeUI:
    fake_ui = headless_ui

    async def _normalize_stub(upload_file: Any, **_kwargs: Any) -> Path:
        name = getattr(upload_file, "name", "unnamed.csv")
        if name == "broken.csv":
            raise RuntimeError("unreadable")
        p = tmp_path / name
        p.write_bytes(b"")
        return p

    monkeypatch.setattr(uw_mod, "normalize_uploaded_file", _normalize_stub, raising=True)
    return fake_ui


@dataclass
class _FakeUploadFile:
    name: str


@dataclass
class _FakeUploadEvent:
    sender: Any = None
    file: Any = None


@pytest.mark.asyncio
async def test_widget_single_file_upload_calls_callback(headless_widget_env: _FakeUI) -> None:
    received: List[Path] = []

    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        received.append(path)

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)

    ctrl = headless_widget_env.last_upload
    assert ctrl is not None
    assert ctrl.on_upload == widget._on_upload
    assert ctrl.auto_upload is True
    assert ctrl.multiple is False
    assert DATA_FILE_ACCEPT in ctrl.props_string

    await widget._on_upload(_FakeUploadEvent(file=_FakeUploadFile(name="prices.csv")))

    assert [p.name for p in received] == ["prices.csv"]
    assert widget._status.text == "Loaded prices.csv"
    assert widget._spinner.visible is False
    assert ctrl.reset_calls == 1


@pytest.mark.asyncio
async def test_widget_normalize_failure_does_not_call_callback(headless_widget_env: _FakeUI) -> None:
    received: List[Path] = []

    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        received.append(path)

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    await widget._on_upload(_FakeUploadEvent(file=_FakeUploadFile(name="broken.csv")))

    assert received == []
    assert widget._status.text == "Could not read broken.csv"
    assert widget._spinner.visible is False


@pytest.mark.asyncio
async def test_widget_callback_failure_is_reported(headless_widget_env: _FakeUI) -> None:
    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        raise ValueError("bad file")

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    await widget._on_upload(_FakeUploadEvent(file=_FakeUploadFile(name="prices.csv")))

    assert widget._status.text == "Failed to load prices.csv"


@pytest.mark.asyncio
async def test_widget_each_upload_gets_fresh_cancel_token(headless_widget_env: _FakeUI) -> None:
    tokens: List[CancelToken] = []

    async def on_path_ready(path: Path, cancel: CancelToken) -> None:
        tokens.append(cancel)

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    await widget._on_upload(_FakeUploadEvent(file=_FakeUploadFile(name="a.csv")))
    widget.cancel()
    await widget._on_upload(_FakeUploadEvent(file=_FakeUploadFile(name="b.csv")))

    assert len(tokens) == 2
    assert tokens[0].cancelled is True
    assert tokens[1].cancelled is False
    assert tokens[0] is not tokens[1]


@pytest.mark.asyncio
async def test_widget_ignores_event_without_file(headless_widget_env: _FakeUI) -> None:
    called = False

    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        nonlocal called
        called = True

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    await widget._on_upload(_FakeUploadEvent(file=None))
    assert called is False


class _FakeSmallUpload:
    def __init__(self, name: str, data: bytes) -> None:
        self.name = name
        self.content_type = "text/csv"
        self._data = data

    async def read(self) -> bytes:
        return self._data


class _FakeLargeUpload:
    def __init__(self, path: Path) -> None:
        self.name = path.name
        self.content_type = "text/csv"
        self._path = path


@pytest.mark.asyncio
async def test_widget_removes_temp_file_after_callback(headless_ui: _FakeUI) -> None:
    seen: List[Path] = []

    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        assert path.read_bytes() == b"Date,Price\n2024-01-01,1\n"
        seen.append(path)

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    upload = _FakeSmallUpload("prices.csv", b"Date,Price\n2024-01-01,1\n")
    await widget._on_upload(_FakeUploadEvent(file=upload))

    assert len(seen) == 1
    assert seen[0].name.startswith(TEMP_PREFIX)
    assert seen[0].suffix == ".csv"
    assert not seen[0].exists()
    assert widget._status.text == "Loaded prices.csv"


@pytest.mark.asyncio
async def test_widget_removes_temp_file_when_callback_fails(headless_ui: _FakeUI) -> None:
    seen: List[Path] = []

    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        seen.append(path)
        raise ValueError("bad file")

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    await widget._on_upload(_FakeUploadEvent(file=_FakeSmallUpload("prices.csv", b"a,b\n")))

    assert len(seen) == 1
    assert not seen[0].exists()
    assert widget._status.text == "Failed to load prices.csv"


@pytest.mark.asyncio
async def test_widget_keeps_upload_own_file(headless_ui: _FakeUI, tmp_path: Path) -> None:
    own = tmp_path / "prices.csv"
    own.write_bytes(b"Date,Price\n")
    seen: List[Path] = []

    async def on_path_ready(path: Path, _cancel: CancelToken) -> None:
        seen.append(path)

    widget = UploadWidget(label="Data file", on_path_ready=on_path_ready)
    await widget._on_upload(_FakeUploadEvent(file=_FakeLargeUpload(own)))

    assert seen == [own]
    assert own.exists()


def test_is_normalize_temp_file(tmp_path: Path) -> None:
    temp = tmp_path / f"{TEMP_PREFIX}abc.csv"
    assert is_normalize_temp_file(temp, _FakeUploadFile(name="prices.csv")) is True
    assert is_normalize_temp_file(temp, _FakeLargeUpload(temp)) is False
    assert is_normalize_temp_file(tmp_path / "prices.csv", _FakeUploadFile(name="prices.csv")) is False
