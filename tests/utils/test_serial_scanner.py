# tests/utils/test_serial_scanner.py
from types import SimpleNamespace
from unittest.mock import patch, MagicMock

import pytest
import serial

from r200_uhf.utils import serial_scanner
from r200_uhf.utils.serial_scanner import PortInfo, scan_serial_ports

COMPORTS = "r200_uhf.utils.serial_scanner.serial.tools.list_ports.comports"
SERIAL_CLASS = "r200_uhf.utils.serial_scanner.serial.Serial"


def fake_port(device, description="n/a", vid=None, pid=None):
    return SimpleNamespace(
        device=device, description=description, hwid=f"USB VID:PID={vid}:{pid}",
        vid=vid, pid=pid, serial_number=None, manufacturer=None,
    )


@pytest.fixture
def ports():
    return [
        fake_port("/dev/ttyUSB1", "USB Serial", vid=0x1A86, pid=0x7523),
        fake_port("/dev/ttyS0", "ttyS0"),
        fake_port("/dev/ttyUSB0", "CP2102", vid=0x10C4, pid=0xEA60),
    ]


def test_scan_lists_all_ports_sorted(ports):
    with patch(COMPORTS, return_value=ports):
        found = scan_serial_ports()
    assert [p.device for p in found] == ["/dev/ttyS0", "/dev/ttyUSB0", "/dev/ttyUSB1"]
    assert all(p.accessible is None for p in found)

def test_scan_bridges_only(ports):
    with patch(COMPORTS, return_value=ports):
        found = scan_serial_ports(bridges_only=True)
    assert [p.bridge_vendor for p in found] == ["Silicon Labs", "WCH"]

def test_scan_checks_access(ports):
    def open_port(port, timeout):
        if port == "/dev/ttyUSB1":
            raise serial.SerialException("[Errno 13] Permission denied: '/dev/ttyUSB1'")
        return MagicMock()

    with patch(COMPORTS, return_value=ports), patch(SERIAL_CLASS, side_effect=open_port):
        found = {p.device: p for p in scan_serial_ports(check_access=True)}
    assert found["/dev/ttyUSB0"].accessible is True
    assert found["/dev/ttyUSB1"].accessible is False
    assert found["/dev/ttyUSB1"].error == "Permission denied"

def test_port_info_str():
    info = PortInfo(device="COM3", description="USB-SERIAL CH340", hwid="", vid=0x1A86, pid=0x7523,
                    accessible=False, error="Busy")
    assert str(info) == "COM3 - USB-SERIAL CH340 [1A86:7523] (not accessible: Busy)"

def test_unknown_vendor_has_no_bridge():
    assert PortInfo(device="x", description="", hwid="", vid=0x1234).bridge_vendor is None
    assert PortInfo(device="x", description="", hwid="").bridge_vendor is None
    assert 0x0403 in serial_scanner.USB_UART_VENDOR_IDS
