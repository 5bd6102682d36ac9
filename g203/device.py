"""
G203 LED — HID device discovery, connection and writes.

The mouse exposes its vendor protocol on two HID collections of
multi-interface 01:

    col04  "config"  only needed once, to disable onboard memory
    col05  "LED"     every lighting command goes here

Collections are picked out of the OS interface paths by substring. This is
a Windows path convention; ``led_path`` / ``config_path`` override it.
"""

import logging

from g203.backend import HidapiBackend
from g203.errors import (DeviceNotFound, G203Error, InitializationFailed,
                         InterfaceMissing, ValidationError)
from g203.protocol import FRAME_LEN, INIT_COMMAND, describe

log = logging.getLogger(__name__)

INTERFACE_MARKER = "mi_01"
CONFIG_COLLECTION = "col04"
LED_COLLECTION = "col05"


def match_interface(path, collection):
    """True if *path* names *collection* of the vendor interface."""
    p = path.lower()
    return INTERFACE_MARKER in p and collection in p


def discover(vendor_id, product_id, backend=None):
    """Return the paths of every HID interface reporting vendor_id:product_id.

    A single mouse enumerates once per collection, so many matches are
    normal. No match returns an empty list.
    """
    backend = backend or HidapiBackend()
    paths = []
    for d in backend.enumerate():
        if d.get("vendor_id") == vendor_id and d.get("product_id") == product_id:
            paths.append(d["path"])
    log.debug("discover 0x%04X:0x%04X -> %d interface(s)",
              vendor_id, product_id, len(paths))
    return paths


def _select(paths, collection, role):
    found = [p for p in paths if match_interface(p, collection)]
    if len(found) > 1:
        log.warning("%d %s interfaces match, using %s", len(found), role, found[0])
    return found[0] if found else None


class Connection:
    """Open config/LED handles for one mouse.

    Use as a context manager so both handles are released on every exit
    path::

        with connect(G203_VID, G203_PID) as conn:
            send(conn, encode_fixed_color(255, 0, 0))
    """

    def __init__(self, backend=None):
        self.backend = backend or HidapiBackend()
        self.config_handle = None
        self.led_handle = None
        self.config_path = None
        self.led_path = None
        self.warnings = []

    @property
    def connected(self):
        return self.led_handle is not None

    @property
    def degraded(self):
        """Connected, but without a confirmed onboard-memory disable."""
        return self.connected and bool(self.warnings)

    def close(self):
        disconnect(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self):
        state = "connected" if self.connected else "disconnected"
        if self.degraded:
            state += ", degraded"
        return f"<Connection {state} led={self.led_path!r} config={self.config_path!r}>"


def _initialize(conn):
    """Disable onboard memory. Failures become warnings on *conn*."""
    if conn.config_handle is None:
        warning = InterfaceMissing("Config interface (col04) not found; "
                                   "onboard memory left enabled")
    else:
        try:
            conn.backend.control_write(conn.config_handle, INIT_COMMAND)
            log.debug("Onboard memory disabled via %s", conn.config_path)
            return
        except G203Error as e:
            warning = InitializationFailed(f"Onboard memory disable failed: {e}")
    log.warning("%s; LED commands may be ignored", warning)
    conn.warnings.append(warning)


def connect(vendor_id, product_id, backend=None, led_path=None, config_path=None):
    """Find, open and initialize the mouse.

    Args:
        vendor_id, product_id: USB identity to look for.
        backend:     HidBackend to use (defaults to hidapi).
        led_path:    Explicit LED interface path, skips collection matching.
        config_path: Explicit config interface path, skips collection matching.

    Returns:
        Connection. ``conn.degraded`` is True when the config interface was
        absent or the init command failed.

    Raises:
        DeviceNotFound:   nothing reports vendor_id:product_id.
        InterfaceMissing: no LED interface among the matches.
        OpenFailed:       the OS refused one of the handles.
    """
    conn = Connection(backend)
    paths = discover(vendor_id, product_id, conn.backend)
    if not paths and not led_path:
        raise DeviceNotFound(f"No HID interface for 0x{vendor_id:04X}:0x{product_id:04X}")

    led_path = led_path or _select(paths, LED_COLLECTION, "LED")
    config_path = config_path or _select(paths, CONFIG_COLLECTION, "config")
    if led_path is None:
        raise InterfaceMissing(f"LED interface ({LED_COLLECTION}) not found "
                               f"among {len(paths)} interface(s)")

    try:
        conn.led_handle = conn.backend.open(led_path)
        conn.led_path = led_path
        if config_path is not None:
            conn.config_handle = conn.backend.open(config_path)
            conn.config_path = config_path
        log.info("Connected: LED=%s config=%s", led_path, config_path)
        _initialize(conn)
    except BaseException:
        disconnect(conn)
        raise
    return conn


def send(conn, frame):
    """Write one 20-byte command to the LED interface. No retry."""
    frame = bytes(frame)
    if len(frame) != FRAME_LEN:
        raise ValidationError(f"Command must be {FRAME_LEN} bytes, got {len(frame)}")
    if conn is None or conn.led_handle is None:
        raise InterfaceMissing("LED interface is not open")
    log.debug("send %s", describe(frame))
    return conn.backend.control_write(conn.led_handle, frame)


def disconnect(conn):
    """Close both handles. Safe to call repeatedly or before connect()."""
    if conn is None:
        return
    for attr in ("led_handle", "config_handle"):
        handle = getattr(conn, attr)
        setattr(conn, attr, None)
        if handle is None:
            continue
        try:
            conn.backend.close(handle)
        except OSError as e:
            log.warning("Error closing %s: %s", attr, e)
    conn.led_path = None
    conn.config_path = None
