# r200_uhf/transport/mock.py

import logging
from typing import Optional, Any, Dict, List, Union
from collections import deque

from r200_uhf.transport.base import BaseTransport
from r200_uhf.core.exceptions import TransportError, TimeoutError

logger = logging.getLogger(__name__)

# Queue marker: the next read times out
TIMEOUT = object()

ReadEvent = Union[bytes, Exception, object]


class MockTransport(BaseTransport):
    """
    A mock transport layer for testing and simulation.

    Reads are served from a scripted queue of events: byte chunks are
    returned (split to the requested size), ``TIMEOUT`` markers and
    exceptions are raised, and ``b''`` is returned as-is to simulate an idle
    or closed stream. An exhausted queue behaves like a silent device and
    times out. Written frames are recorded for inspection.
    """

    def __init__(self, connection_details: Optional[Dict[str, Any]] = None, name: str = "Mock", timeout: float = 0.5):
        """
        Initializes the Mock Transport.

        Args:
            connection_details: Not strictly used but kept for interface compatibility.
            name: A name for this mock instance for logging purposes.
            timeout: Nominal read timeout reported to callers.
        """
        super().__init__(connection_details if connection_details is not None else {})
        self._name = name
        self._timeout = timeout
        self._read_queue: deque[ReadEvent] = deque()
        self._sent_data_queue: deque[bytes] = deque()
        self._pending_write = bytearray()
        self.flush_count = 0
        self.read_count = 0

        logger.info(f"MockTransport '{self._name}' initialized.")

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def connect(self) -> None:
        """Simulates establishing a connection."""
        if self._connected:
            logger.warning(f"[{self._name}] Already connected.")
            return
        self._connected = True
        logger.info(f"[{self._name}] Mock connection established.")

    def disconnect(self) -> None:
        """Simulates closing the connection."""
        if not self._connected:
            return
        self._connected = False
        logger.info(f"[{self._name}] Mock connection closed.")

    def write_all(self, data: bytes) -> None:
        if not self.is_connected():
            raise TransportError(f"[{self._name}] Cannot send data: Not connected.")
        logger.debug(f"[{self._name}] Simulating send: {data.hex(' ').upper()}")
        self._pending_write.extend(data)

    def flush(self) -> None:
        if not self.is_connected():
            raise TransportError(f"[{self._name}] Cannot flush: Not connected.")
        self.flush_count += 1
        if self._pending_write:
            self._sent_data_queue.append(bytes(self._pending_write))
            self._pending_write.clear()

    def read(self, size: int) -> bytes:
        if not self.is_connected():
            raise TransportError(f"[{self._name}] Cannot read: Not connected.")
        self.read_count += 1
        if not self._read_queue:
            raise TimeoutError(f"[{self._name}] No scripted data left.")

        event = self._read_queue.popleft()
        if event is TIMEOUT:
            raise TimeoutError(f"[{self._name}] Scripted timeout.")
        if isinstance(event, Exception):
            raise event

        data = bytes(event)
        if len(data) > size:
            self._read_queue.appendleft(data[size:])
            data = data[:size]
        logger.debug(f"[{self._name}] Mock 'receiving': {data.hex(' ').upper()}")
        return data

    # --- Mock Control Methods ---

    def add_response(self, response: bytes) -> None:
        """Queues bytes to be returned by one read call."""
        logger.debug(f"[{self._name}] Adding mock response: {response.hex(' ').upper()}")
        self._read_queue.append(bytes(response))

    def add_responses(self, responses: List[bytes]) -> None:
        """Queues several chunks, one read call each."""
        for response in responses:
            self.add_response(response)

    def add_timeout(self) -> None:
        """Queues a read that times out."""
        self._read_queue.append(TIMEOUT)

    def add_error(self, error: Exception) -> None:
        """Queues a read that raises ``error``."""
        self._read_queue.append(error)

    def add_idle(self) -> None:
        """Queues a read that returns no bytes without error."""
        self._read_queue.append(b'')

    def get_sent_data(self) -> Optional[bytes]:
        """Retrieves the oldest flushed frame from the queue (FIFO)."""
        try:
            return self._sent_data_queue.popleft()
        except IndexError:
            return None

    def get_all_sent_data(self) -> List[bytes]:
        """Retrieves and clears all flushed frames."""
        data = list(self._sent_data_queue)
        self._sent_data_queue.clear()
        return data

    def pending_reads(self) -> int:
        return len(self._read_queue)

    def clear_response_queue(self) -> None:
        """Clears any pending read events."""
        logger.debug(f"[{self._name}] Clearing mock read queue ({len(self._read_queue)} items).")
        self._read_queue.clear()

    def clear_send_queue(self) -> None:
        """Clears the record of sent data."""
        self._sent_data_queue.clear()
        self._pending_write.clear()
