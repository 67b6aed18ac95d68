# r200_uhf/transport/serial_transport.py

import logging
from typing import Optional, Any, Dict

import serial

from r200_uhf.transport.base import BaseTransport
from r200_uhf.core.exceptions import SerialConnectionError, ReadError, WriteError, TimeoutError

logger = logging.getLogger(__name__)

DEFAULT_SERIAL_SETTINGS = {
    'baudrate': 115200,
    'bytesize': serial.EIGHTBITS,
    'parity': serial.PARITY_NONE,
    'stopbits': serial.STOPBITS_ONE,
    'timeout': 0.5,  # Read window; an empty window ends a burst
    'write_timeout': 2.0,
    'xonxoff': False,
    'rtscts': False,
    'dsrdtr': False,
}


class SerialTransport(BaseTransport):
    """
    Blocking serial communication transport using pyserial.
    """

    def __init__(self, connection_details: Dict[str, Any]):
        """
        Initializes the Serial Transport.

        Args:
            connection_details: Dictionary containing serial port settings.
                Required: 'port' (e.g., '/dev/ttyUSB0', 'COM3')
                Optional: 'baudrate', 'bytesize', 'parity', 'stopbits', 'timeout', etc.
                          Defaults are taken from DEFAULT_SERIAL_SETTINGS.
        """
        super().__init__(connection_details)

        if 'port' not in self._connection_details:
            raise ValueError("Missing 'port' in connection_details for SerialTransport.")

        self._serial_settings = DEFAULT_SERIAL_SETTINGS.copy()
        self._serial_settings.update(self._connection_details)
        if not self._serial_settings['timeout']:
            raise ValueError("SerialTransport needs a positive read 'timeout' to detect the end of a burst.")

        self._port = self._serial_settings['port']
        self._serial: Optional[serial.Serial] = None

        logger.info(f"SerialTransport initialized for port {self._port} with settings: {self._serial_settings}")

    @property
    def port(self) -> str:
        return self._port

    @property
    def timeout(self) -> Optional[float]:
        return self._serial_settings['timeout']

    def connect(self) -> None:
        """Opens the serial port."""
        if self._connected:
            logger.warning(f"Serial port {self._port} already connected.")
            return

        logger.info(f"Connecting to serial port {self._port}...")
        settings_for_open = self._serial_settings.copy()
        del settings_for_open['port']
        try:
            self._serial = serial.Serial(port=self._port, **settings_for_open)
        except serial.SerialException as e:
            logger.error(f"Failed to connect to serial port {self._port}: {e}")
            self._serial = None
            raise SerialConnectionError(port=self._port, message=str(e), original_exception=e) from e
        except (OSError, ValueError) as e:
            logger.error(f"Unexpected error connecting to {self._port}: {e}")
            self._serial = None
            raise SerialConnectionError(port=self._port, message=str(e), original_exception=e) from e

        self._connected = True
        logger.info(f"Serial port {self._port} connected successfully.")

    def disconnect(self) -> None:
        """Closes the serial port."""
        port = self._serial
        self._serial = None
        if port is None and not self._connected:
            return

        logger.info(f"Disconnecting from serial port {self._port}...")
        if port is not None:
            try:
                port.close()
            except (serial.SerialException, OSError) as e:
                logger.error(f"Error closing serial port {self._port}: {e}")
        self._connected = False
        logger.info(f"Serial port {self._port} disconnected.")

    def write_all(self, data: bytes) -> None:
        self._ensure_connected()
        logger.debug(f"Serial sending ({len(data)} bytes) on {self._port}: {data.hex(' ').upper()}")
        try:
            written = self._serial.write(data)
        except serial.SerialTimeoutException as e:
            raise WriteError(f"Write timed out on {self._port}", original_exception=e) from e
        except (serial.SerialException, OSError) as e:
            logger.error(f"Failed to write to serial port {self._port}: {e}")
            raise WriteError(f"Failed to write to serial port {self._port}", original_exception=e) from e
        if written is not None and written != len(data):
            raise WriteError(f"Short write on {self._port}: {written} of {len(data)} bytes")

    def flush(self) -> None:
        self._ensure_connected()
        try:
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            logger.error(f"Failed to flush serial port {self._port}: {e}")
            raise WriteError(f"Failed to flush serial port {self._port}", original_exception=e) from e

    def read(self, size: int) -> bytes:
        """
        Reads what is waiting (at least one byte), blocking up to the timeout.

        pyserial reports an expired timeout as an empty read; that is raised
        here as TimeoutError so callers can tell it apart from a closed stream.
        """
        self._ensure_connected()
        try:
            # Block for the first byte, then drain whatever else is queued.
            data = self._serial.read(1)
            if data:
                waiting = min(self._serial.in_waiting, size - 1)
                if waiting > 0:
                    data += self._serial.read(waiting)
        except (serial.SerialException, OSError) as e:
            logger.error(f"Serial error during read on {self._port}: {e}")
            raise ReadError(f"Failed to read from serial port {self._port}", original_exception=e) from e

        if not data:
            raise TimeoutError(f"No data on {self._port} within {self.timeout}s.")
        logger.debug(f"Serial received ({len(data)} bytes) on {self._port}: {data.hex(' ').upper()}")
        return data
