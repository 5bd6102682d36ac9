import logging

from g203.backend import HidapiBackend
from g203.colors import format_color
from g203.device import (CONFIG_COLLECTION, LED_COLLECTION, connect, match_interface,
                         send)
from g203.errors import G203Error, ValidationError
from g203.lighting import effect_frames, parse_effect, status
from g203.protocol import FRAME_LEN, Fixed, describe, encode_brightness

log = logging.getLogger(__name__)


def _connect(settings, backend=None):
    """Connect per *settings*; print and return None on failure."""
    try:
        conn = connect(settings.vendor_id, settings.product_id, backend=backend,
                       led_path=settings.led_path, config_path=settings.config_path)
    except G203Error as e:
        print(f"Mouse not available: {e}")
        return None
    print(f"  Connected: LED={conn.led_path}")
    for w in conn.warnings:
        print(f"  Warning: {w}")
    return conn


def _apply(settings, frames, dry_run=False, backend=None):
    """Send *frames* in order over a fresh connection."""
    if dry_run:
        for f in frames:
            print(f"  TX (dry-run): {f.hex(' ')}  [{describe(f)}]")
        return 0

    conn = _connect(settings, backend)
    if conn is None:
        return 1
    with conn:
        for f in frames:
            try:
                send(conn, f)
            except G203Error as e:
                print(f"  Write failed: {e}")
                return 1
            print(f"  TX: {describe(f)}")
    return 0


def cmd_scan(settings, backend=None):
    vid, pid = settings.vendor_id, settings.product_id
    print(f"Scanning for G203 (0x{vid:04X}:0x{pid:04X})...")
    print("=" * 60)
    backend = backend or HidapiBackend()
    devs = [d for d in backend.enumerate()
            if d.get("vendor_id") == vid and d.get("product_id") == pid]
    if not devs:
        print("  No G203 mouse found.")
        return 1
    print(f"  {len(devs)} interface(s):")
    for d in devs:
        path = d["path"]
        if match_interface(path, LED_COLLECTION):
            tag = " ** LED **"
        elif match_interface(path, CONFIG_COLLECTION):
            tag = " ** config **"
        else:
            tag = ""
        page = d.get("usage_page")
        page = f"0x{page:04X}" if page is not None else "?"
        print(f"    iface={d.get('interface_number', '?')}  page={page}  {path}{tag}")
    return 0


def cmd_color(settings, rgb, brightness=None, dry_run=False, backend=None):
    try:
        frames = effect_frames(Fixed(*rgb), brightness)
    except ValidationError as e:
        print(f"Invalid input: {e}")
        return 1
    print(f"Setting color {format_color(rgb)}")
    return _apply(settings, frames, dry_run, backend)


def cmd_effect(settings, name, color_rgb=None, speed=None, brightness=None,
               dry_run=False, backend=None):
    try:
        effect = parse_effect(name, color=color_rgb, speed=speed)
        frames = effect_frames(effect, brightness)
    except ValidationError as e:
        print(f"Invalid input: {e}")
        return 1

    desc = f"Setting effect: {name}"
    if color_rgb and name != "cycle":
        desc += f"  color={format_color(color_rgb)}"
    if name != "fixed":
        desc += f"  speed={effect.speed}ms"
    if brightness is not None:
        desc += f"  bright={brightness}%"
    print(desc)
    return _apply(settings, frames, dry_run, backend)


def cmd_brightness(settings, percent, dry_run=False, backend=None):
    try:
        frame = encode_brightness(percent)
    except ValidationError as e:
        print(f"Invalid input: {e}")
        return 1
    print(f"Setting brightness {percent}%")
    return _apply(settings, [frame], dry_run, backend)


def cmd_status(settings, backend=None):
    conn = _connect(settings, backend)
    if conn is None:
        return 1
    with conn:
        st = status(conn)
        print(f"  LED interface:    {st['led_path']}")
        print(f"  Config interface: {st['config_path'] or '-'}")
        print(f"  State: {'degraded' if st['degraded'] else 'ready'}")
    return 0


def cmd_raw(settings, hex_str, dry_run=False, backend=None):
    hex_str = hex_str.replace(" ", "").replace(":", "")
    if len(hex_str) != FRAME_LEN * 2:
        print(f"Need {FRAME_LEN * 2} hex chars ({FRAME_LEN} bytes), got {len(hex_str)}")
        return 1
    try:
        frame = bytes.fromhex(hex_str)
    except ValueError as e:
        print(f"Bad hex: {e}")
        return 1
    return _apply(settings, [frame], dry_run, backend)
