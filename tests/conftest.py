"""Shared fixtures: a HID backend that records writes instead of touching USB."""

import pytest

from g203.backend import HidBackend
from g203.errors import OpenFailed, WriteFailed
from g203.protocol import G203_PID, G203_VID

CONFIG_PATH = r"\\?\hid#vid_046d&pid_c092&mi_01&col04#7&2a8f1e2&0&0003#{4d1e55b2-f16f-11cf-88cb-001111000030}"
LED_PATH = r"\\?\HID#VID_046D&PID_C092&MI_01&Col05#7&2a8f1e2&0&0004#{4d1e55b2-f16f-11cf-88cb-001111000030}"
MOUSE_PATH = r"\\?\hid#vid_046d&pid_c092&mi_00#7&1c2f33a&0&0000#{4d1e55b2-f16f-11cf-88cb-001111000030}"
OTHER_PATH = r"\\?\hid#vid_1234&pid_5678&mi_01&col05#8&aa&0&0000#{4d1e55b2-f16f-11cf-88cb-001111000030}"


def iface(path, vid=G203_VID, pid=G203_PID):
    return {"path": path, "vendor_id": vid, "product_id": pid,
            "usage_page": 0xFF00, "interface_number": 1}


class FakeBackend(HidBackend):
    """Records opens, writes and closes per path."""

    def __init__(self, interfaces=(), fail_open=(), fail_write=()):
        self.interfaces = list(interfaces)
        self.fail_open = set(fail_open)
        self.fail_write = set(fail_write)
        self.opened = []
        self.closed = []
        self.writes = []

    def enumerate(self):
        return [dict(d) for d in self.interfaces]

    def open(self, path):
        if path in self.fail_open:
            raise OpenFailed(path, "access denied")
        self.opened.append(path)
        return ("handle", path)

    def control_write(self, handle, data):
        path = handle[1]
        if path in self.fail_write:
            raise WriteFailed("Output report rejected", code=31)
        self.writes.append((path, bytes(data)))
        return len(data)

    def close(self, handle):
        self.closed.append(handle[1])

    def writes_to(self, path):
        return [d for p, d in self.writes if p == path]


@pytest.fixture
def backend():
    return FakeBackend([iface(MOUSE_PATH), iface(CONFIG_PATH), iface(LED_PATH),
                        iface(OTHER_PATH, vid=0x1234, pid=0x5678)])
