"""Header bar for the explorer app: title, loaded file name and theme toggle."""

from __future__ import annotations

from typing import Callable, Optional

from nicegui import app, ui

THEME_STORAGE_KEY = "facestats_dark_mode"


def build_explorer_header(
    title: str,
    *,
    dark_default: bool = False,
    on_theme_change: Optional[Callable[[bool], None]] = None,
) -> tuple[ui.dark_mode, ui.label]:
    """Build header with title, source label and theme toggle.

    Left: title.
    Right: name of the loaded file (empty until a file loads), theme toggle.

    Args:
        title: Header title.
        dark_default: Dark mode when nothing is stored for the user yet.
        on_theme_change: Called with the new dark-mode value after a toggle.

    Returns:
        (dark mode controller, source label) so the page can update both.
    """
    dark_mode = ui.dark_mode()
    dark_mode.value = app.storage.user.get(THEME_STORAGE_KEY, dark_default)

    def _update_theme_icon() -> None:
        icon = "light_mode" if dark_mode.value else "dark_mode"
        theme_btn.props(f"icon={icon}")

    def _toggle_theme() -> None:
        dark_mode.value = not dark_mode.value
        app.storage.user[THEME_STORAGE_KEY] = dark_mode.value
        _update_theme_icon()
        if on_theme_change is not None:
            on_theme_change(bool(dark_mode.value))

    with ui.header().classes("items-center justify-between").props("dense").style(
        "min-height: 36px; height: 36px; padding: 0 8px;"
    ):
        ui.label(title).classes("!text-lg font-bold italic text-white")

        with ui.row().classes("items-center gap-2"):
            source_label = ui.label("").classes("text-sm text-white")
            theme_btn = ui.button(
                icon="light_mode" if dark_mode.value else "dark_mode",
                on_click=_toggle_theme,
            ).props("flat round dense text-color=white").tooltip("Toggle dark / light mode")

    return dark_mode, source_label
