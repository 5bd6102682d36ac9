"""Transport tests against FakeBackend: discovery, connect, send, disconnect."""

import pytest

from conftest import CONFIG_PATH, LED_PATH, MOUSE_PATH, OTHER_PATH, FakeBackend, iface
from g203.device import Connection, connect, disconnect, discover, match_interface, send
from g203.errors import (DeviceNotFound, InitializationFailed, InterfaceMissing,
                         OpenFailed, ValidationError, WriteFailed)
from g203.protocol import G203_PID, G203_VID, INIT_COMMAND, encode_fixed_color


# =========================================================================
# Discovery
# =========================================================================

class TestDiscover:

    def test_filters_by_reported_ids(self, backend):
        paths = discover(G203_VID, G203_PID, backend)
        assert paths == [MOUSE_PATH, CONFIG_PATH, LED_PATH]
        assert OTHER_PATH not in paths

    def test_no_match(self, backend):
        assert discover(0xDEAD, 0xBEEF, backend) == []

    def test_empty_system(self):
        assert discover(G203_VID, G203_PID, FakeBackend()) == []


class TestMatchInterface:

    def test_case_insensitive(self):
        assert match_interface(LED_PATH, "col05")
        assert match_interface(CONFIG_PATH, "col04")

    def test_needs_interface_marker(self):
        assert not match_interface(r"\\?\hid#vid_046d&pid_c092&col05#x", "col05")

    def test_wrong_collection(self):
        assert not match_interface(LED_PATH, "col04")
        assert not match_interface(MOUSE_PATH, "col05")


# =========================================================================
# Connect
# =========================================================================

class TestConnect:

    def test_full_connect_initializes(self, backend):
        conn = connect(G203_VID, G203_PID, backend)
        assert conn.connected
        assert not conn.degraded
        assert conn.led_path == LED_PATH
        assert conn.config_path == CONFIG_PATH
        assert backend.writes == [(CONFIG_PATH, INIT_COMMAND)]

    def test_missing_config_is_degraded(self):
        backend = FakeBackend([iface(MOUSE_PATH), iface(LED_PATH)])
        conn = connect(G203_VID, G203_PID, backend)
        assert conn.connected
        assert conn.degraded
        assert conn.config_handle is None
        assert isinstance(conn.warnings[0], InterfaceMissing)
        assert backend.writes == []

    def test_missing_led_is_fatal(self):
        backend = FakeBackend([iface(MOUSE_PATH), iface(CONFIG_PATH)])
        with pytest.raises(InterfaceMissing):
            connect(G203_VID, G203_PID, backend)
        assert backend.opened == []

    def test_missing_led_without_config_is_fatal(self):
        backend = FakeBackend([iface(MOUSE_PATH)])
        with pytest.raises(InterfaceMissing):
            connect(G203_VID, G203_PID, backend)

    def test_device_not_found(self, backend):
        with pytest.raises(DeviceNotFound):
            connect(0xDEAD, 0xBEEF, backend)

    def test_init_failure_is_degraded(self):
        backend = FakeBackend([iface(CONFIG_PATH), iface(LED_PATH)],
                              fail_write=[CONFIG_PATH])
        conn = connect(G203_VID, G203_PID, backend)
        assert conn.connected
        assert conn.degraded
        assert isinstance(conn.warnings[0], InitializationFailed)

    def test_init_failure_is_logged(self, caplog):
        backend = FakeBackend([iface(CONFIG_PATH), iface(LED_PATH)],
                              fail_write=[CONFIG_PATH])
        with caplog.at_level("WARNING", logger="g203.device"):
            connect(G203_VID, G203_PID, backend)
        assert "Onboard memory disable failed" in caplog.text

    def test_led_open_failure(self):
        backend = FakeBackend([iface(CONFIG_PATH), iface(LED_PATH)],
                              fail_open=[LED_PATH])
        with pytest.raises(OpenFailed) as exc:
            connect(G203_VID, G203_PID, backend)
        assert exc.value.path == LED_PATH
        assert backend.opened == []

    def test_config_open_failure_releases_led(self):
        backend = FakeBackend([iface(CONFIG_PATH), iface(LED_PATH)],
                              fail_open=[CONFIG_PATH])
        with pytest.raises(OpenFailed):
            connect(G203_VID, G203_PID, backend)
        assert backend.closed == [LED_PATH]

    def test_explicit_paths_skip_matching(self):
        backend = FakeBackend([iface("/dev/hidraw3"), iface("/dev/hidraw4")])
        conn = connect(G203_VID, G203_PID, backend,
                       led_path="/dev/hidraw4", config_path="/dev/hidraw3")
        assert conn.led_path == "/dev/hidraw4"
        assert backend.writes == [("/dev/hidraw3", INIT_COMMAND)]

    def test_explicit_led_path_without_enumeration(self):
        conn = connect(G203_VID, G203_PID, FakeBackend(), led_path="/dev/hidraw4")
        assert conn.connected
        assert conn.degraded

    def test_unexpected_init_error_releases_handles(self):
        class BrokenConfigBackend(FakeBackend):
            def control_write(self, handle, data):
                raise OSError(5, "I/O error")

        backend = BrokenConfigBackend([iface(CONFIG_PATH), iface(LED_PATH)])
        with pytest.raises(OSError):
            connect(G203_VID, G203_PID, backend)
        assert sorted(backend.closed) == sorted([LED_PATH, CONFIG_PATH])

    def test_interrupt_during_init_releases_handles(self):
        class InterruptedBackend(FakeBackend):
            def control_write(self, handle, data):
                raise KeyboardInterrupt

        backend = InterruptedBackend([iface(CONFIG_PATH), iface(LED_PATH)])
        with pytest.raises(KeyboardInterrupt):
            connect(G203_VID, G203_PID, backend)
        assert sorted(backend.closed) == sorted([LED_PATH, CONFIG_PATH])

    def test_duplicate_matches_use_first(self):
        second = LED_PATH.replace("0004", "0009")
        backend = FakeBackend([iface(CONFIG_PATH), iface(LED_PATH), iface(second)])
        conn = connect(G203_VID, G203_PID, backend)
        assert conn.led_path == LED_PATH


# =========================================================================
# Send
# =========================================================================

class TestSend:

    def test_writes_to_led_interface(self, backend):
        conn = connect(G203_VID, G203_PID, backend)
        frame = encode_fixed_color(255, 0, 0)
        send(conn, frame)
        assert backend.writes_to(LED_PATH) == [frame]

    def test_write_failure_propagates(self):
        backend = FakeBackend([iface(CONFIG_PATH), iface(LED_PATH)],
                              fail_write=[LED_PATH])
        conn = connect(G203_VID, G203_PID, backend)
        with pytest.raises(WriteFailed) as exc:
            send(conn, encode_fixed_color(0, 0, 0))
        assert exc.value.code == 31

    def test_requires_open_led_handle(self, backend):
        conn = Connection(backend)
        with pytest.raises(InterfaceMissing):
            send(conn, encode_fixed_color(0, 0, 0))

    def test_after_disconnect(self, backend):
        conn = connect(G203_VID, G203_PID, backend)
        disconnect(conn)
        with pytest.raises(InterfaceMissing):
            send(conn, encode_fixed_color(0, 0, 0))

    def test_wrong_length(self, backend):
        conn = connect(G203_VID, G203_PID, backend)
        with pytest.raises(ValidationError):
            send(conn, b"\x11\xff\x0e")
        assert backend.writes_to(LED_PATH) == []


# =========================================================================
# Disconnect
# =========================================================================

class TestDisconnect:

    def test_closes_both(self, backend):
        conn = connect(G203_VID, G203_PID, backend)
        disconnect(conn)
        assert sorted(backend.closed) == sorted([LED_PATH, CONFIG_PATH])
        assert not conn.connected
        assert conn.led_handle is None and conn.config_handle is None

    def test_idempotent(self, backend):
        conn = connect(G203_VID, G203_PID, backend)
        disconnect(conn)
        disconnect(conn)
        assert len(backend.closed) == 2

    def test_never_connected(self, backend):
        conn = Connection(backend)
        disconnect(conn)
        disconnect(None)
        assert backend.closed == []

    def test_context_manager(self, backend):
        with connect(G203_VID, G203_PID, backend) as conn:
            assert conn.connected
        assert not conn.connected
        assert len(backend.closed) == 2

    def test_context_manager_on_error(self, backend):
        with pytest.raises(RuntimeError):
            with connect(G203_VID, G203_PID, backend):
                raise RuntimeError("boom")
        assert len(backend.closed) == 2
