# r200_uhf/utils/serial_scanner.py
"""Utility to list serial ports a R200 module may be attached to."""

import logging
from dataclasses import dataclass
from typing import List, Optional

import serial
import serial.tools.list_ports

logger = logging.getLogger(__name__)

# USB-UART bridges found on R200 carrier boards: WCH CH340/CH341, Silicon Labs CP210x, FTDI
USB_UART_VENDOR_IDS = {
    0x1A86: "WCH",
    0x10C4: "Silicon Labs",
    0x0403: "FTDI",
}


@dataclass
class PortInfo:
    """Represents information about a detected serial port."""
    device: str                   # Port name (e.g., COM3, /dev/ttyUSB0)
    description: str
    hwid: str
    vid: Optional[int] = None
    pid: Optional[int] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    accessible: Optional[bool] = None  # None when access was not checked
    error: Optional[str] = None

    @property
    def bridge_vendor(self) -> Optional[str]:
        """Name of the USB-UART bridge vendor, if this port is a known one."""
        if self.vid is None:
            return None
        return USB_UART_VENDOR_IDS.get(self.vid)

    def __str__(self):
        text = f"{self.device} - {self.description}"
        if self.vid is not None and self.pid is not None:
            text += f" [{self.vid:04X}:{self.pid:04X}]"
        if self.accessible is False:
            text += f" (not accessible: {self.error})"
        return text


def _check_port_access(device: str) -> tuple[bool, Optional[str]]:
    """Opens and closes the port once; returns (accessible, error message)."""
    try:
        port = serial.Serial(port=device, timeout=0.1)
        port.close()
        return True, None
    except serial.SerialException as e:
        err_msg = str(e)
        if "Permission denied" in err_msg or "Access is denied" in err_msg:
            return False, "Permission denied"
        if "Device or resource busy" in err_msg:
            return False, "Busy"
        logger.debug(f"SerialException checking port {device}: {e}")
        return False, f"Cannot open ({type(e).__name__})"
    except OSError as e:
        logger.warning(f"Unexpected error checking port {device}: {e}")
        return False, f"Unexpected error ({type(e).__name__})"


def scan_serial_ports(check_access: bool = False, bridges_only: bool = False) -> List[PortInfo]:
    """
    Lists the serial ports of this machine.

    Args:
        check_access: If True, briefly opens each port to see whether it can be used.
        bridges_only: If True, keeps only ports behind a known USB-UART bridge.

    Returns:
        A list of PortInfo, sorted by device name.
    """
    ports_found: List[PortInfo] = []

    for port in serial.tools.list_ports.comports():
        info = PortInfo(
            device=str(port.device),
            description=str(port.description or ""),
            hwid=str(port.hwid or ""),
            vid=port.vid,
            pid=port.pid,
            serial_number=port.serial_number,
            manufacturer=port.manufacturer,
        )
        if bridges_only and info.bridge_vendor is None:
            logger.debug(f"Skipping {info.device}: not a known USB-UART bridge")
            continue
        if check_access:
            info.accessible, info.error = _check_port_access(info.device)
        ports_found.append(info)

    ports_found.sort(key=lambda p: p.device)
    logger.info(f"Scan complete. Found {len(ports_found)} ports.")
    return ports_found
