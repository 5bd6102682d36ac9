"""
G203 LED — the caller-facing lighting operations.

Each one encodes, then sends on an already open Connection.
"""

import logging

from g203.device import send
from g203.errors import ValidationError
from g203.protocol import (DEFAULT_SPEED, Breathe, Cycle, Fixed, encode_brightness,
                           encode_effect, encode_fixed_color)

log = logging.getLogger(__name__)

EFFECT_NAMES = ("fixed", "breathe", "cycle")


def set_color(conn, r, g, b):
    frame = encode_fixed_color(r, g, b)
    send(conn, frame)


def effect_frames(effect, brightness=None):
    """Encode *effect*, plus a brightness command if *brightness* is given.

    Everything is encoded up front, so a bad brightness never leaves the
    mouse half-updated.
    """
    frames = [encode_effect(effect)]
    if brightness is not None:
        frames.append(encode_brightness(brightness))
    return frames


def set_effect(conn, effect, brightness=None):
    for frame in effect_frames(effect, brightness):
        send(conn, frame)


def set_brightness(conn, percent):
    send(conn, encode_brightness(percent))


def status(conn):
    """Snapshot of *conn* as a plain dict."""
    return {
        "connected": bool(conn is not None and conn.connected),
        "degraded": bool(conn is not None and conn.degraded),
        "led_path": conn.led_path if conn is not None else None,
        "config_path": conn.config_path if conn is not None else None,
        "warnings": [str(w) for w in conn.warnings] if conn is not None else [],
    }


def parse_effect(name, color=None, speed=None):
    """Build an effect record from CLI-style input.

    Args:
        name:  'fixed', 'breathe' or 'cycle'.
        color: (r, g, b); required for fixed and breathe, ignored by cycle.
        speed: Period in ms; defaults to DEFAULT_SPEED.
    """
    name = name.lower()
    if name not in EFFECT_NAMES:
        raise ValidationError(f"Unknown effect '{name}'. Valid: {', '.join(EFFECT_NAMES)}")
    speed = DEFAULT_SPEED if speed is None else speed
    if name == "cycle":
        if color is not None:
            log.info("cycle ignores the colour argument")
        return Cycle(speed)
    if color is None:
        raise ValidationError(f"Effect '{name}' needs a colour")
    if name == "fixed":
        return Fixed(*color)
    return Breathe(*color, speed=speed)
