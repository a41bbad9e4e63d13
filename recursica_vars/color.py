"""Color math for WCAG contrast checks."""

import math
import re
from typing import Any

AA_THRESHOLD = 4.5
WHITE = "#ffffff"
BLACK = "#000000"

_HEX6 = re.compile(r"^#?([0-9a-f]{6})$", re.IGNORECASE)
_HEX3 = re.compile(r"^#?([0-9a-f]{3})$", re.IGNORECASE)


def normalize_hex(value: Any) -> str | None:
    """Normalize ``fff``/``#FFF``/``#ffffff`` to ``#ffffff``; None if not a hex color."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.lower() == "white":
        return WHITE
    if text.lower() == "black":
        return BLACK
    match = _HEX6.match(text)
    if match:
        return f"#{match.group(1).lower()}"
    match = _HEX3.match(text)
    if match:
        return "#" + "".join(ch * 2 for ch in match.group(1).lower())
    return None


def hex_to_rgb(value: Any) -> tuple[int, int, int] | None:
    hex_value = normalize_hex(value)
    if hex_value is None:
        return None
    return (
        int(hex_value[1:3], 16),
        int(hex_value[3:5], 16),
        int(hex_value[5:7], 16),
    )


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    channels = [max(0, min(255, math.floor(c + 0.5))) for c in (red, green, blue)]
    return "#" + "".join(f"{c:02x}" for c in channels)


def _linearize(channel: int) -> float:
    c = channel / 255.0
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(value: Any) -> float:
    """WCAG relative luminance; 0.0 for unparseable input."""
    rgb = hex_to_rgb(value)
    if rgb is None:
        return 0.0
    red, green, blue = (_linearize(c) for c in rgb)
    return 0.2126 * red + 0.7152 * green + 0.0722 * blue


def contrast_ratio(first: Any, second: Any) -> float:
    """WCAG contrast ratio between two colors, from 1.0 to 21.0.

    Returns 0.0 when either color cannot be parsed.
    """
    if hex_to_rgb(first) is None or hex_to_rgb(second) is None:
        return 0.0
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def blend_hex_over(foreground: Any, background: Any, opacity: float = 1.0) -> str | None:
    """Composite ``foreground`` at ``opacity`` over an opaque ``background``."""
    fg = hex_to_rgb(foreground)
    bg = hex_to_rgb(background)
    if fg is None or bg is None:
        return None
    try:
        alpha = float(opacity)
    except (TypeError, ValueError):
        alpha = 1.0
    alpha = max(0.0, min(1.0, alpha))
    return rgb_to_hex(
        *(alpha * f + (1 - alpha) * b for f, b in zip(fg, bg, strict=True))
    )


def passes_aa(foreground: Any, background: Any, threshold: float = AA_THRESHOLD) -> bool:
    return contrast_ratio(foreground, background) >= threshold


def pick_aa_on_tone(tone: Any, threshold: float = AA_THRESHOLD) -> str:
    """Pick white or black text for a tone.

    White wins when it meets the threshold; otherwise black when it does;
    otherwise whichever contrasts more.
    """
    white = contrast_ratio(WHITE, tone)
    black = contrast_ratio(BLACK, tone)
    if white >= threshold:
        return WHITE
    if black >= threshold:
        return BLACK
    return WHITE if white >= black else BLACK
