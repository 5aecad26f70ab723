"""Discrete Chernoff face for the first five dataset attributes.

Each face part is driven by one attribute; the part's shape is the level of
that attribute's latest value (facestats.algorithms.levels):

    LOW -> square, MID -> circle, HIGH -> triangle

Part order: head, eyes, mouth, nose, ears (attributes 1..5).
face_svg returns a standalone SVG string; FacesView shows it with
per-part visibility checkboxes.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from html import escape
from typing import Iterable, Mapping, Optional

from nicegui import ui

from facestats.algorithms.aggregate import classify_levels
from facestats.algorithms.levels import LevelResult
from facestats.dataset.conventions import attr_label, attribute_keys
from facestats.dataset.dataset import Dataset
from facestats.utils.logging import get_logger

logger = get_logger(__name__)

FACE_PARTS: tuple[str, ...] = ("head", "eyes", "mouth", "nose", "ears")

PART_TITLES = {
    "head": "Head",
    "eyes": "Eyes",
    "mouth": "Mouth",
    "nose": "Nose",
    "ears": "Ears",
}

SVG_WIDTH = 420
SVG_HEIGHT = 280
STROKE = "#333"
STROKE_WIDTH = 2
SKIN = "#ffe0bd"
EYE_FILL = "#ffffff"
BACKGROUND = "#222"
TEXT_FILL = "#ffffff"

LEGEND_TEXT = "low -> square, mid -> circle, high -> triangle (latest value vs. quartiles)"


class FaceConfigError(ValueError):
    """The dataset cannot drive all five face parts."""


@dataclass(frozen=True)
class FacePart:
    part: str
    attribute: str
    label: str
    level: LevelResult

    @property
    def shape(self) -> str:
        return self.level.shape


def build_face_config(dataset: Dataset, levels: Mapping[str, LevelResult]) -> dict[str, FacePart]:
    """Assign the first five attributes to FACE_PARTS.

    Raises:
        FaceConfigError: If there are fewer than five attributes, or one of
            the first five has no level (no finite values).
    """
    keys = attribute_keys(dataset.rows)
    if len(keys) < len(FACE_PARTS):
        raise FaceConfigError(
            f"A Chernoff face needs at least {len(FACE_PARTS)} attributes; found {len(keys)}."
        )
    config: dict[str, FacePart] = {}
    for part, attr in zip(FACE_PARTS, keys):
        level = levels.get(attr)
        if level is None:
            raise FaceConfigError(f"Attribute {attr!r} ({part}) has no numeric values.")
        config[part] = FacePart(
            part=part,
            attribute=attr,
            label=attr_label(attr, dataset.header_map),
            level=level,
        )
    return config


# -----------------------------------------------------------------------------
# SVG primitives
# -----------------------------------------------------------------------------


def _fmt(v: float) -> str:
    return f"{v:g}"


def _rect(x: float, y: float, w: float, h: float, fill: str, rx: float = 0) -> str:
    rx_attr = f' rx="{_fmt(rx)}"' if rx else ""
    return (
        f'<rect x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(w)}" height="{_fmt(h)}"{rx_attr} '
        f'fill="{fill}" stroke="{STROKE}" stroke-width="{STROKE_WIDTH}"/>'
    )


def _circle(cx: float, cy: float, r: float, fill: str) -> str:
    return (
        f'<circle cx="{_fmt(cx)}" cy="{_fmt(cy)}" r="{_fmt(r)}" '
        f'fill="{fill}" stroke="{STROKE}" stroke-width="{STROKE_WIDTH}"/>'
    )


def _polygon(points: Iterable[tuple[float, float]], fill: str) -> str:
    pts = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in points)
    return f'<polygon points="{pts}" fill="{fill}" stroke="{STROKE}" stroke-width="{STROKE_WIDTH}"/>'


def _triangle_up(cx: float, cy: float, h: float, fill: str) -> str:
    return _polygon([(cx, cy - h), (cx - h, cy + h), (cx + h, cy + h)], fill)


def head_svg(shape: str, cx: float, cy: float, size: float = 140) -> str:
    half = size / 2
    if shape == "square":
        return _rect(cx - half, cy - half, size, size, SKIN, rx=8)
    if shape == "triangle":
        return _triangle_up(cx, cy, half, SKIN)
    return _circle(cx, cy, half, SKIN)


def eye_svg(shape: str, cx: float, cy: float, size: float = 20) -> str:
    if shape == "square":
        half = size / 1.5
        return _rect(cx - half, cy - half, half * 2, half * 2, EYE_FILL)
    if shape == "triangle":
        return _triangle_up(cx, cy, size, EYE_FILL)
    return _circle(cx, cy, size, EYE_FILL)


def ear_svg(shape: str, cx: float, cy: float, size: float = 24) -> str:
    if shape == "square":
        half = size / 1.4
        return _rect(cx - half, cy - half, half * 2, half * 2, SKIN)
    if shape == "triangle":
        return _triangle_up(cx, cy, size, SKIN)
    return _circle(cx, cy, size, SKIN)


def mouth_svg(shape: str, cx: float, y: float, width: float = 80) -> str:
    if shape == "square":
        h = 8
        return _rect(cx - width / 2, y - h / 2, width, h, "none")
    if shape == "triangle":
        return _polygon([(cx - width / 2, y), (cx + width / 2, y), (cx, y + 18)], "none")
    return (
        f'<path d="M {_fmt(cx - width / 2)} {_fmt(y)} Q {_fmt(cx)} {_fmt(y + 18)} {_fmt(cx + width / 2)} {_fmt(y)}" '
        f'fill="none" stroke="{STROKE}" stroke-width="{STROKE_WIDTH}"/>'
    )


def nose_svg(shape: str, cx: float, y_top: float, height: float = 40) -> str:
    if shape == "square":
        w = 14
        return _rect(cx - w / 2, y_top, w, height, "none")
    if shape == "triangle":
        return _polygon([(cx, y_top), (cx - 10, y_top + height), (cx + 10, y_top + height)], "none")
    return _circle(cx, y_top + height / 2, 8, "none")


def _caption_svg(text: str, x: float, y: float, width_chars: int = 55) -> str:
    lines = textwrap.wrap(text, width=width_chars) or [""]
    spans = "".join(
        f'<tspan x="{_fmt(x)}" dy="{0 if i == 0 else 14}">{escape(line)}</tspan>'
        for i, line in enumerate(lines)
    )
    return (
        f'<text x="{_fmt(x)}" y="{_fmt(y)}" text-anchor="middle" font-size="11" '
        f'font-weight="bold" fill="{TEXT_FILL}">{spans}</text>'
    )


def face_svg(config: Mapping[str, FacePart], visible_parts: Optional[Iterable[str]] = None) -> str:
    """Render a face as an SVG string.

    Args:
        config: Output of build_face_config.
        visible_parts: Parts to draw; None draws all. The caption always
            lists every part.
    """
    visible = set(FACE_PARTS if visible_parts is None else visible_parts)
    cx = SVG_WIDTH / 2
    cy = SVG_HEIGHT / 2 - 10

    elements: list[str] = []
    # draw order: head, ears, eyes, nose, mouth
    if "head" in visible:
        elements.append(head_svg(config["head"].shape, cx, cy))
    if "ears" in visible:
        shape = config["ears"].shape
        elements.append(ear_svg(shape, cx - 90, cy - 10))
        elements.append(ear_svg(shape, cx + 90, cy - 10))
    if "eyes" in visible:
        shape = config["eyes"].shape
        elements.append(eye_svg(shape, cx - 40, cy - 30))
        elements.append(eye_svg(shape, cx + 40, cy - 30))
    if "nose" in visible:
        elements.append(nose_svg(config["nose"].shape, cx, cy - 5))
    if "mouth" in visible:
        elements.append(mouth_svg(config["mouth"].shape, cx, cy + 40))

    caption = ", ".join(f"{config[p].label}: {config[p].shape}" for p in FACE_PARTS)
    elements.append(_caption_svg(caption, cx, SVG_HEIGHT - 55))
    elements.append(
        f'<text x="{_fmt(cx)}" y="{SVG_HEIGHT - 20}" text-anchor="middle" font-size="10" '
        f'fill="{TEXT_FILL}">{escape(LEGEND_TEXT)}</text>'
    )

    body = "".join(elements)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{SVG_WIDTH}" height="{SVG_HEIGHT}" '
        f'style="border: 1px solid #ccc; background: {BACKGROUND}">{body}</svg>'
    )


class FacesView:
    """Chernoff face plus visibility checkboxes (one per part, and all/none)."""

    def __init__(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.levels = classify_levels(dataset.rows, attribute_keys(dataset.rows))
        self.visible_parts: set[str] = set(FACE_PARTS)
        self._config: dict[str, FacePart] = {}
        self._svg: Optional[ui.html] = None
        self._part_boxes: dict[str, ui.checkbox] = {}
        self._all_box: Optional[ui.checkbox] = None
        self._syncing = False

    def toggle_part(self, part: str, visible: bool) -> None:
        if visible:
            self.visible_parts.add(part)
        else:
            self.visible_parts.discard(part)
        self._refresh()

    def set_all(self, visible: bool) -> None:
        self.visible_parts = set(FACE_PARTS) if visible else set()
        self._refresh()

    @property
    def all_visible(self) -> bool:
        return self.visible_parts == set(FACE_PARTS)

    def render(self) -> None:
        """Create the faces UI inside the current container."""
        if self.dataset.is_empty:
            ui.label("No data. Load a file first.")
            return
        try:
            config = build_face_config(self.dataset, self.levels)
        except FaceConfigError as e:
            logger.info("faces unavailable: %s", e)
            ui.label(str(e)).classes("text-negative")
            return
        self._config = config

        with ui.row().classes("w-full justify-center items-start gap-12 flex-wrap"):
            self._svg = ui.html(face_svg(config, self.visible_parts))
            with ui.column().classes("gap-1"):
                ui.label("Visible face parts:")
                self._all_box = ui.checkbox(
                    "All / none",
                    value=self.all_visible,
                    on_change=lambda e: self._on_all_change(e.value),
                )
                for part in FACE_PARTS:
                    self._part_boxes[part] = ui.checkbox(
                        f"{PART_TITLES[part]} - {config[part].label}",
                        value=part in self.visible_parts,
                        on_change=lambda e, p=part: self._on_part_change(p, e.value),
                    ).classes("ml-4")

    def _on_all_change(self, value: bool) -> None:
        if self._syncing:
            return
        self.set_all(bool(value))

    def _on_part_change(self, part: str, value: bool) -> None:
        if self._syncing:
            return
        self.toggle_part(part, bool(value))

    def _refresh(self) -> None:
        if self._svg is None:
            return
        self._svg.content = face_svg(self._config, self.visible_parts)
        self._syncing = True
        try:
            if self._all_box is not None:
                self._all_box.value = self.all_visible
            for part, box in self._part_boxes.items():
                box.value = part in self.visible_parts
        finally:
            self._syncing = False
