from __future__ import annotations

import re

from domain.models import NEUTRAL_GRAY

Rgb = tuple[float, float, float]

FALLBACK_RGB: Rgb = (0.4, 0.4, 0.4)
LANE_TINT_FACTOR = 0.15
_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


def is_hex_color(value: str | None) -> bool:
    return bool(value) and _HEX_COLOR.match(value.strip()) is not None


def hex_to_rgb(value: str | None) -> Rgb:
    match = _HEX_COLOR.match((value or "").strip())
    if match is None:
        return FALLBACK_RGB
    digits = match.group(1)
    return (
        int(digits[0:2], 16) / 255.0,
        int(digits[2:4], 16) / 255.0,
        int(digits[4:6], 16) / 255.0,
    )


def rgb_to_hex(rgb: Rgb) -> str:
    return "#" + "".join(f"{_to_byte(channel):02x}" for channel in rgb)


def rgb_to_bytes(rgb: Rgb) -> tuple[int, int, int]:
    return (_to_byte(rgb[0]), _to_byte(rgb[1]), _to_byte(rgb[2]))


def normalize_hex(value: str | None, default: str = NEUTRAL_GRAY) -> str:
    match = _HEX_COLOR.match((value or "").strip())
    if match is None:
        return default
    return f"#{match.group(1).lower()}"


def tint(value: str | None, factor: float = LANE_TINT_FACTOR) -> str:
    r, g, b = hex_to_rgb(value)
    return rgb_to_hex(
        (
            1.0 - (1.0 - r) * factor,
            1.0 - (1.0 - g) * factor,
            1.0 - (1.0 - b) * factor,
        )
    )


def _to_byte(channel: float) -> int:
    return max(0, min(255, int(round(channel * 255))))
