"""
G203 LED — colour parsing and input sanitising for interactive callers.

The encoder rejects out-of-range values; the ``sanitize_*`` helpers here are
for sliders and pickers that would rather clamp than fail.
"""

import string

from g203.errors import ValidationError
from g203.protocol import (BRIGHTNESS_MAX, BRIGHTNESS_MIN, COLOR_MAX, COLOR_MIN,
                           SPEED_MAX, SPEED_MIN)


# ── Color parsing ────────────────────────────────────────────────────────
def parse_color(color_str):
    """Parse '#RRGGBB', 'RRGGBB' or '#RGB' into an (r, g, b) tuple."""
    s = color_str.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    if len(s) != 6:
        raise ValidationError(f"Expected 6 hex chars, got '{color_str}'")
    if not all(c in string.hexdigits for c in s):
        raise ValidationError(f"Not a hex colour: '{color_str}'")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def format_color(rgb):
    return "#{:02x}{:02x}{:02x}".format(*rgb)


# ── Clamping ─────────────────────────────────────────────────────────────
def _clamp(value, lo, hi):
    return max(lo, min(hi, int(round(value))))


def sanitize_rgb(r, g, b):
    return tuple(_clamp(v, COLOR_MIN, COLOR_MAX) for v in (r, g, b))


def sanitize_speed(speed_ms):
    return _clamp(speed_ms, SPEED_MIN, SPEED_MAX)


def sanitize_brightness(percent):
    return _clamp(percent, BRIGHTNESS_MIN, BRIGHTNESS_MAX)
