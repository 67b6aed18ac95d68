# r200_uhf/core/assembler.py

import logging
from typing import List, Optional

from r200_uhf.transport.base import BaseTransport
from r200_uhf.protocols.framing import Packet
from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.core.exceptions import TransportError, ReadError, TimeoutError, FrameParseError

logger = logging.getLogger(__name__)


def hexdump_line(prefix: str, data: bytes) -> str:
    return f"{prefix}{data.hex(' ').upper()}"


class FrameAssembler:
    """
    Recovers discrete frames from the transport's unframed byte stream.

    Bytes from successive reads accumulate in a rolling buffer. Each time a
    HEADER ... END span is present it is cut out, decoded, and removed from
    the buffer, so frames split across reads or packed into one read are
    both handled. The buffer is cleared when it holds no HEADER at all and
    trimmed when it passes its high-water mark.
    """

    def __init__(
        self,
        transport: BaseTransport,
        read_size: int = r200_const.READ_CHUNK_SIZE,
        high_water_mark: int = r200_const.BUFFER_HIGH_WATER_MARK,
        trim_size: int = r200_const.BUFFER_TRIM_SIZE,
        verify_checksum: bool = False,
    ):
        if trim_size > high_water_mark:
            raise ValueError(f"trim_size ({trim_size}) must not exceed high_water_mark ({high_water_mark}).")
        self._transport = transport
        self._read_size = read_size
        self._high_water_mark = high_water_mark
        self._trim_size = trim_size
        self._verify_checksum = verify_checksum
        self._rolling = bytearray()

    @property
    def buffered(self) -> int:
        """Number of bytes currently held in the rolling buffer."""
        return len(self._rolling)

    def reset(self) -> None:
        """Drops any buffered bytes."""
        if self._rolling:
            logger.debug(f"Discarding {len(self._rolling)} buffered bytes.")
        self._rolling.clear()

    def discard_partial(self) -> int:
        """
        Drops buffered bytes that hold no END marker, i.e. the start of a
        frame that never completed. Complete frames are kept.

        Returns:
            The number of bytes dropped.
        """
        if not self._rolling or r200_const.FRAME_END in self._rolling:
            return 0
        dropped = len(self._rolling)
        logger.debug(f"Dropping unterminated frame: {hexdump_line('', self._rolling)}")
        self._rolling.clear()
        return dropped

    def drain(self) -> int:
        """
        Reads and throws away everything the transport delivers until it
        times out or goes idle, then clears the rolling buffer.

        Returns:
            The number of bytes discarded.

        Raises:
            ReadError: If the transport fails for a reason other than a timeout.
        """
        discarded = len(self._rolling)
        self._rolling.clear()
        while True:
            try:
                data = self._transport.read(self._read_size)
            except TimeoutError:
                break
            except ReadError:
                raise
            except TransportError as e:
                raise ReadError(str(e), original_exception=e) from e
            if not data:
                break
            logger.debug(hexdump_line("[DRAIN] ", data))
            discarded += len(data)
        if discarded:
            logger.info(f"Discarded {discarded} stale bytes.")
        return discarded

    def recover_frames(self, expected_count: Optional[int] = None) -> Optional[List[Packet]]:
        """
        Reads from the transport until ``expected_count`` packets are collected.

        With ``expected_count`` of None collection only stops at the first
        read timeout after at least one packet, which is how an inventory
        burst ends.

        Frames left in the rolling buffer by a previous call are handed out
        before the transport is read again.

        Returns:
            The collected packets in arrival order, or None if the transport
            reported an idle/closed stream (a zero-byte read) before any
            packet was collected. A zero-byte read after packets were
            collected ends the collection and returns them.

        Raises:
            TimeoutError: If the read timed out before any packet was collected.
            ReadError: If the transport failed for any other reason.
        """
        output: List[Packet] = []
        if self._rolling and self._collect(output, expected_count):
            return output

        while True:
            try:
                data = self._transport.read(self._read_size)
            except TimeoutError:
                if not output:
                    raise
                logger.debug(f"Read timeout after {len(output)} packet(s); burst complete.")
                return output
            except ReadError:
                raise
            except TransportError as e:
                logger.error(f"Serial read error: {e}")
                raise ReadError(str(e), original_exception=e) from e

            if not data:
                logger.debug("Transport returned no data.")
                return output or None

            self._rolling.extend(data)
            logger.debug(hexdump_line("[RAW] ", self._rolling))

            if self._collect(output, expected_count):
                return output

            if len(self._rolling) > self._high_water_mark:
                logger.warning(
                    f"Rolling buffer reached {len(self._rolling)} bytes; keeping the last {self._trim_size}."
                )
                del self._rolling[:len(self._rolling) - self._trim_size]

    def recover_one(self) -> Optional[Packet]:
        """Reads until one packet is collected; returns None if none arrived."""
        packets = self.recover_frames(expected_count=1)
        if not packets:
            return None
        return packets[0]

    def _collect(self, output: List[Packet], expected_count: Optional[int]) -> bool:
        """Moves every complete frame out of the rolling buffer; True once ``expected_count`` is reached."""
        while True:
            if r200_const.FRAME_HEADER not in self._rolling:
                if self._rolling:
                    logger.debug(f"No frame header in {len(self._rolling)} buffered bytes; discarding as noise.")
                    self._rolling.clear()
                return False
            if r200_const.FRAME_END not in self._rolling:
                return False

            packet = self._take_next_chunk()
            if packet is not None:
                output.append(packet)
                if expected_count is not None and len(output) >= expected_count:
                    return True

    def _take_next_chunk(self) -> Optional[Packet]:
        """Cuts the first HEADER..END span out of the rolling buffer and decodes it."""
        start = self._rolling.index(r200_const.FRAME_HEADER)
        end = self._rolling.index(r200_const.FRAME_END)
        chunk = bytes(self._rolling[start:end + 1])
        del self._rolling[:end + 1]

        if not (len(chunk) > r200_const.MIN_CHUNK_LENGTH
                and chunk[0] == r200_const.FRAME_HEADER
                and chunk[-1] == r200_const.FRAME_END):
            return None

        try:
            packet = Packet(chunk)
        except FrameParseError as e:
            logger.warning(f"Dropping undecodable chunk: {e}")
            return None

        if not packet.is_valid(verify_checksum=self._verify_checksum):
            resync = chunk.find(r200_const.FRAME_HEADER, 1)
            if resync > 0:
                # A later HEADER starts a new frame; only the bytes before it are dropped
                logger.warning(f"Dropping truncated frame: {hexdump_line('', chunk[:resync])}")
                self._rolling[:0] = chunk[resync:]
                return None
            logger.warning(f"Dropping invalid frame: {hexdump_line('', chunk)}")
            return None
        if not packet.payload:
            return None

        logger.debug(packet.debug())
        return packet
