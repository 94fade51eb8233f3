"""Color arithmetic for accent ramps and adapter decoration.

All helpers accept CSS hex colors (``#rgb`` or ``#rrggbb``). Anything else
(``rgb(...)``, named colors) is passed through unchanged or rejected with
None, since the pipeline only ever derives shades from hex primaries.

Example:
    >>> scale_color("#00A86B", 0.5)
    '#005436'
"""

from __future__ import annotations

import math
import re

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (CSS tooling convention)."""
    return math.floor(value + 0.5)


def hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    """Parse a hex color into an (r, g, b) tuple.

    Returns:
        Channel tuple, or None if ``color`` is not a hex color
    """
    match = _HEX_RE.match(color.strip()) if color else None
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    """Format channels as a lowercase ``#rrggbb`` string (channels clamped)."""
    return "#" + "".join(f"{max(0, min(255, c)):02x}" for c in rgb)


def rgb_triplet(color: str, fallback: str = "88, 101, 242") -> str:
    """Return ``"r, g, b"`` for use inside ``rgba(...)``."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return fallback
    return ", ".join(str(c) for c in rgb)


def scale_color(color: str, factor: float) -> str:
    """Multiply each channel by ``factor``.

    A factor of 1.0 returns the input untouched; non-hex input is returned
    unchanged.
    """
    if factor == 1.0:
        return color
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    return rgb_to_hex(tuple(round_half_up(c * factor) for c in rgb))  # type: ignore[arg-type]


def mix_with_black(color: str, amount: float) -> str:
    """Darken by mixing ``amount`` (0..1) of the color with black."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    amount = max(0.0, min(1.0, amount))
    return rgb_to_hex(tuple(round_half_up(c * amount) for c in rgb))  # type: ignore[arg-type]


def blend_with_white(color: str, alpha: float) -> str:
    """Composite the color at ``alpha`` opacity over white."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    alpha = max(0.0, min(1.0, alpha))
    return rgb_to_hex(
        tuple(round_half_up(255 * (1 - alpha) + c * alpha) for c in rgb)  # type: ignore[arg-type]
    )


def with_alpha(color: str, hex_alpha: str) -> str:
    """Attach a two-digit hex alpha to a color.

    ``#rrggbb`` gains the suffix (``#00A86B40``); other hex forms are
    expanded first; non-hex colors are returned unchanged.
    """
    stripped = color.strip()
    if re.fullmatch(r"#[0-9a-fA-F]{6}", stripped):
        return f"{stripped}{hex_alpha}"
    rgb = hex_to_rgb(stripped)
    if rgb is None:
        return color
    return f"{rgb_to_hex(rgb)}{hex_alpha}"
