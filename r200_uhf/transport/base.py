# r200_uhf/transport/base.py

from abc import ABC, abstractmethod
from typing import Any, Optional

from r200_uhf.core.exceptions import TransportError


class BaseTransport(ABC):
    """
    Abstract base class for all communication transport layers.

    A transport is a blocking duplex byte channel: ``write_all`` then
    ``flush`` to send, ``read`` to receive whatever is available or block up
    to the configured timeout. Concrete implementations handle the specifics
    of Serial or Mock communication.
    """

    def __init__(self, connection_details: dict[str, Any]):
        """
        Initializes the transport base.

        Args:
            connection_details: A dictionary containing parameters needed to
                                establish the connection (e.g., {'port': '/dev/ttyUSB0', 'baudrate': 115200}).
        """
        self._connection_details = connection_details
        self._connected = False

    @abstractmethod
    def connect(self) -> None:
        """
        Establishes the connection to the reader device.

        Raises:
            ConnectionError: If the connection cannot be established.
        """

    @abstractmethod
    def disconnect(self) -> None:
        """Closes the connection. Safe to call even if not connected."""

    @abstractmethod
    def write_all(self, data: bytes) -> None:
        """
        Writes every byte of ``data``.

        Raises:
            WriteError: If writing fails.
        """

    @abstractmethod
    def flush(self) -> None:
        """
        Blocks until written data has left the transport.

        Raises:
            WriteError: If flushing fails.
        """

    @abstractmethod
    def read(self, size: int) -> bytes:
        """
        Reads up to ``size`` available bytes, blocking up to the read timeout.

        Returns:
            The bytes read. An empty result means the stream is idle or closed.

        Raises:
            TimeoutError: If no byte arrived within the timeout.
            ReadError: If the underlying read fails.
        """

    @property
    @abstractmethod
    def timeout(self) -> Optional[float]:
        """The read timeout in seconds."""

    def is_connected(self) -> bool:
        """Returns True if the transport layer is currently connected, False otherwise."""
        return self._connected

    def _ensure_connected(self) -> None:
        if not self.is_connected():
            raise TransportError(f"{type(self).__name__} is not connected.")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    @property
    def connection_details(self) -> dict[str, Any]:
        """Returns the connection details provided during initialization."""
        return self._connection_details
