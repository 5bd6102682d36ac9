"""
G203 LED — HID backend: the four OS-level operations the transport needs.

``HidBackend`` is the seam between the connection logic in ``g203.device``
and the operating system. ``HidapiBackend`` is the real one; tests swap in a
fake that records writes.
"""

import logging
from abc import ABC, abstractmethod

from g203.errors import OpenFailed, WriteFailed

log = logging.getLogger(__name__)


def _path_str(path):
    """hidapi reports paths as bytes; the rest of the package uses str."""
    if isinstance(path, bytes):
        return path.decode("utf-8", "replace")
    return path


class HidBackend(ABC):
    """Enumerate, open, write and close HID interfaces."""

    @abstractmethod
    def enumerate(self):
        """Return a list of dicts with at least path, vendor_id, product_id."""

    @abstractmethod
    def open(self, path):
        """Open *path* read/write. Raises OpenFailed."""

    @abstractmethod
    def control_write(self, handle, data):
        """Send *data* as an output report. Raises WriteFailed."""

    @abstractmethod
    def close(self, handle):
        """Release *handle*."""


class HidapiBackend(HidBackend):
    """Backend built on the ``hid`` module (cython-hidapi)."""

    def enumerate(self):
        import hid

        infos = []
        for d in hid.enumerate():
            info = dict(d)
            info["path"] = _path_str(d["path"])
            infos.append(info)
        return infos

    def open(self, path):
        import hid

        dev = hid.device()
        try:
            dev.open_path(path.encode() if isinstance(path, str) else path)
        except OSError as e:
            raise OpenFailed(path, e) from e
        return dev

    def control_write(self, handle, data):
        data = bytes(data)
        # hidapi's write() falls back to SET_REPORT(Output) on the control
        # pipe when the interface has no interrupt OUT endpoint.
        send = getattr(handle, "send_output_report", None) or handle.write
        try:
            n = send(data)
        except (OSError, ValueError) as e:
            raise WriteFailed("Output report rejected",
                              code=getattr(e, "errno", None)) from e
        if n is None or n < 0:
            raise WriteFailed(f"Output report rejected: {handle.error()}", code=n)
        if n < len(data):
            raise WriteFailed(f"Short write: {n}/{len(data)} bytes", code=n)
        log.debug("TX %s (%d bytes)", data.hex(), n)
        return n

    def close(self, handle):
        handle.close()
