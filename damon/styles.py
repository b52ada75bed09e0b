"""Colour palette and markup tags used by the terminal interface."""

from __future__ import annotations

RGB = tuple[int, int, int]

BACKGROUND_RGB: RGB = (40, 44, 48)

HIGHLIGHT_PRIMARY_HEX = "#26ffe6"
HIGHLIGHT_SECONDARY_HEX = "#baff26"
STANDARD_COLOR_HEX = "#00b57c"
COLOR_ACTIVE_HEX = "#b3f1ff"
COLOR_WHITE_HEX = "#ffffff"
COLOR_LIGHT_GREY_HEX = "#cccccc"
COLOR_MODAL_INFO_HEX = "#61877f"
COLOR_ATTENTION_HEX = "#d98b6a"

STANDARD_COLOR_TAG = f"[{STANDARD_COLOR_HEX}]"
HIGHLIGHT_PRIMARY_TAG = f"[{HIGHLIGHT_PRIMARY_HEX}]"
HIGHLIGHT_SECONDARY_TAG = f"[{HIGHLIGHT_SECONDARY_HEX}]"
COLOR_ACTIVE_TAG = f"[{COLOR_ACTIVE_HEX}]"
COLOR_WHITE_TAG = f"[{COLOR_WHITE_HEX}]"
COLOR_LIGHT_GREY_TAG = f"[{COLOR_LIGHT_GREY_HEX}]"


def get_background_color() -> RGB:
    """Return the background colour as an RGB triple."""
    return BACKGROUND_RGB


def hex_to_rgb(value: str) -> RGB:
    """Convert a ``#rrggbb`` colour string into an RGB triple."""
    if not value.startswith("#") or len(value) != 7:
        raise ValueError(f"not a #rrggbb colour: {value!r}")
    digits = value[1:]
    try:
        number = int(digits, 16)
    except ValueError as exc:
        raise ValueError(f"not a #rrggbb colour: {value!r}") from exc
    return (number >> 16) & 0xFF, (number >> 8) & 0xFF, number & 0xFF


BACKGROUND_COLOR = BACKGROUND_RGB
COLOR_HIGHLIGHT_PRIMARY = hex_to_rgb(HIGHLIGHT_PRIMARY_HEX)
COLOR_HIGHLIGHT_SECONDARY = hex_to_rgb(HIGHLIGHT_SECONDARY_HEX)
COLOR_STANDARD = hex_to_rgb(STANDARD_COLOR_HEX)
COLOR_ACTIVE = hex_to_rgb(COLOR_ACTIVE_HEX)
COLOR_MODAL_INFO = hex_to_rgb(COLOR_MODAL_INFO_HEX)
COLOR_ATTENTION = hex_to_rgb(COLOR_ATTENTION_HEX)