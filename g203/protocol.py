"""
G203 LED Protocol — constants, frame builders, and encoding helpers.

Every command is a 20-byte HID output report:

    [0x11, 0xFF, 0x0E, cmd, zone, mode, payload...]

The mouse has a single lighting zone, so byte 4 is always 0.
"""

import enum
from dataclasses import dataclass

from g203.errors import ValidationError

# ── USB Identifiers ──────────────────────────────────────────────────────
G203_VID = 0x046D
G203_PID = 0xC092

# ── Report / command bytes ───────────────────────────────────────────────
FRAME_LEN = 20
HEADER = (0x11, 0xFF, 0x0E)

CMD_LED        = 0x1B
CMD_BRIGHTNESS = 0x11

ZONE = 0x00

# Without this flag the firmware drops LED commands.
APPLY_FLAG_OFFSET = 16
APPLY_FLAG = 0x01

# Effects carry their own brightness scalar; real brightness goes through
# CMD_BRIGHTNESS, so the in-effect value stays at full scale.
EFFECT_BRIGHTNESS = 100

# Disables onboard memory mode (sent once, on the config interface).
INIT_COMMAND = bytes([0x10, 0xFF, 0x0E, 0x5B, 0x01, 0x03, 0x05]) + bytes(13)

# ── Domains ──────────────────────────────────────────────────────────────
COLOR_MIN, COLOR_MAX = 0, 255
SPEED_MIN, SPEED_MAX = 1000, 65535
BRIGHTNESS_MIN, BRIGHTNESS_MAX = 0, 100

DEFAULT_SPEED = 10000


class Mode(enum.IntEnum):
    FIXED = 0x01
    CYCLE = 0x02
    BREATHE = 0x04


# ── Validation ───────────────────────────────────────────────────────────
def _check_int(name, value, lo, hi):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not lo <= value <= hi:
        raise ValidationError(f"{name}={value} out of range ({lo}-{hi})")
    return value


def _check_rgb(r, g, b):
    for name, v in (("red", r), ("green", g), ("blue", b)):
        _check_int(name, v, COLOR_MIN, COLOR_MAX)


def _check_speed(speed_ms):
    return _check_int("speed", speed_ms, SPEED_MIN, SPEED_MAX)


def _check_brightness(percent):
    return _check_int("brightness", percent, BRIGHTNESS_MIN, BRIGHTNESS_MAX)


# ── Frame builder ────────────────────────────────────────────────────────
def _build(cmd, mode, payload=None):
    """Build a 20-byte output report.

    Args:
        cmd:     Command-type byte (CMD_LED or CMD_BRIGHTNESS).
        mode:    Byte 5 (effect mode, or brightness percent).
        payload: Optional {offset: value} map for bytes 6-19.

    Returns:
        bytes: 20-byte frame.
    """
    f = bytearray(FRAME_LEN)
    f[0:3] = bytes(HEADER)
    f[3] = cmd
    f[4] = ZONE
    f[5] = mode
    for off, val in (payload or {}).items():
        f[off] = val
    return bytes(f)


def _speed_bytes(speed_ms):
    """Big-endian (high, low) pair."""
    return (speed_ms >> 8) & 0xFF, speed_ms & 0xFF


def decode_speed(frame, offset):
    """Read a big-endian speed stored at frame[offset:offset + 2]."""
    return frame[offset] * 256 + frame[offset + 1]


# ── Encoders ─────────────────────────────────────────────────────────────
def encode_fixed_color(r, g, b):
    """Solid colour: bytes 6-8 = r, g, b."""
    _check_rgb(r, g, b)
    return _build(CMD_LED, Mode.FIXED, {
        6: r, 7: g, 8: b,
        APPLY_FLAG_OFFSET: APPLY_FLAG,
    })


def encode_breathe(r, g, b, speed_ms):
    """Breathing colour: rgb at 6-8, speed at 9-10, brightness at 12."""
    _check_rgb(r, g, b)
    _check_speed(speed_ms)
    hi, lo = _speed_bytes(speed_ms)
    return _build(CMD_LED, Mode.BREATHE, {
        6: r, 7: g, 8: b,
        9: hi, 10: lo,
        12: EFFECT_BRIGHTNESS,
        APPLY_FLAG_OFFSET: APPLY_FLAG,
    })


def encode_cycle(speed_ms):
    """Colour cycle: rgb zeroed, speed at 11-12, brightness at 13."""
    _check_speed(speed_ms)
    hi, lo = _speed_bytes(speed_ms)
    return _build(CMD_LED, Mode.CYCLE, {
        11: hi, 12: lo,
        13: EFFECT_BRIGHTNESS,
        APPLY_FLAG_OFFSET: APPLY_FLAG,
    })


def encode_brightness(percent):
    """Global brightness: byte 5 = percent, not rescaled."""
    _check_brightness(percent)
    return _build(CMD_BRIGHTNESS, percent)


# ── Effect records ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class Fixed:
    r: int
    g: int
    b: int

    mode = Mode.FIXED

    def __post_init__(self):
        _check_rgb(self.r, self.g, self.b)

    def encode(self):
        return encode_fixed_color(self.r, self.g, self.b)


@dataclass(frozen=True)
class Breathe:
    r: int
    g: int
    b: int
    speed: int = DEFAULT_SPEED

    mode = Mode.BREATHE

    def __post_init__(self):
        _check_rgb(self.r, self.g, self.b)
        _check_speed(self.speed)

    def encode(self):
        return encode_breathe(self.r, self.g, self.b, self.speed)


@dataclass(frozen=True)
class Cycle:
    speed: int = DEFAULT_SPEED

    mode = Mode.CYCLE

    def __post_init__(self):
        _check_speed(self.speed)

    def encode(self):
        return encode_cycle(self.speed)


def encode_effect(effect):
    """Encode any of Fixed / Breathe / Cycle."""
    if not isinstance(effect, (Fixed, Breathe, Cycle)):
        raise ValidationError(f"Unknown effect {effect!r}")
    return effect.encode()


# ── Diagnostics ──────────────────────────────────────────────────────────
def describe(frame):
    """One-line summary of a command buffer, for logs and --dry-run."""
    frame = bytes(frame)
    if len(frame) != FRAME_LEN or tuple(frame[0:3]) != HEADER:
        return f"raw {frame.hex()}"
    if frame[3] == CMD_BRIGHTNESS:
        return f"brightness {frame[5]}%"
    if frame[3] != CMD_LED:
        return f"cmd=0x{frame[3]:02X} {frame.hex()}"
    mode = frame[5]
    if mode == Mode.FIXED:
        return f"fixed #{frame[6]:02x}{frame[7]:02x}{frame[8]:02x}"
    if mode == Mode.BREATHE:
        return (f"breathe #{frame[6]:02x}{frame[7]:02x}{frame[8]:02x}"
                f" speed={decode_speed(frame, 9)}ms")
    if mode == Mode.CYCLE:
        return f"cycle speed={decode_speed(frame, 11)}ms"
    return f"led mode=0x{mode:02X} {frame.hex()}"
