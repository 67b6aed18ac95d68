# r200_uhf/core/session.py

import logging
import struct
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from r200_uhf.core.assembler import FrameAssembler, hexdump_line
from r200_uhf.core.exceptions import NoPacketReceivedError, FrameParseError
from r200_uhf.protocols import framing
from r200_uhf.protocols.framing import Packet
from r200_uhf.protocols.r200 import commands
from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.protocols.r200.records import TagRecord, WorkingArea
from r200_uhf.transport.base import BaseTransport

logger = logging.getLogger(__name__)


@dataclass
class ModuleInfo:
    hardware_version: str
    software_version: str
    manufacturer: str

    def __str__(self):
        return (
            f"Hardware: {self.hardware_version} - Software: {self.software_version}"
            f" - Manufacturer: {self.manufacturer}"
        )


class ProtocolSession:
    """
    Request/response driver for one R200 module on one transport.

    Every operation writes one command frame and then reads the answer
    through the session's FrameAssembler. Responses are matched to requests
    purely by order, so operations must not be interleaved: each call must
    return before the next one starts.
    """

    def __init__(self, transport: BaseTransport, assembler: Optional[FrameAssembler] = None,
                 owns_transport: bool = False):
        """
        Initializes the session.

        Args:
            transport: An instance of a BaseTransport implementation.
            assembler: Optional pre-configured FrameAssembler reading from ``transport``.
            owns_transport: If True the session connects and disconnects the
                            transport when used as a context manager.
        """
        if not isinstance(transport, BaseTransport):
            raise TypeError("transport must be an instance of BaseTransport")

        self._transport = transport
        self._assembler = assembler if assembler is not None else FrameAssembler(transport)
        self._owns_transport = owns_transport

        logger.debug(f"ProtocolSession initialized with transport: {type(transport).__name__}")

    @classmethod
    def open_serial(cls, connection_details: Dict[str, Any], **assembler_options) -> "ProtocolSession":
        """Creates a session over a SerialTransport it owns; use it in a ``with`` block."""
        from r200_uhf.transport.serial_transport import SerialTransport

        transport = SerialTransport(connection_details)
        return cls(transport, FrameAssembler(transport, **assembler_options), owns_transport=True)

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def assembler(self) -> FrameAssembler:
        return self._assembler

    def __enter__(self):
        if self._owns_transport:
            self._transport.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._owns_transport:
            self._transport.disconnect()

    # --- Low-level exchange ---

    def send_command(self, command: commands.Command) -> None:
        """
        Builds the command frame, writes it and flushes the transport.

        The unfinished start of a frame left over from an earlier exchange is
        dropped first so it cannot swallow the new reply.
        """
        frame = framing.build_frame(command)
        self._assembler.discard_partial()
        logger.debug(f"{hexdump_line('[TX] ', frame)} - [{command}]")
        self._transport.write_all(frame)
        self._transport.flush()

    def _request_one(self, command: commands.Command) -> Packet:
        self.send_command(command)
        packet = self._assembler.recover_one()
        if packet is None:
            raise NoPacketReceivedError(f"No response to '{command}'.")
        return packet

    def _recover_burst(self, command: commands.Command) -> List[Packet]:
        packets = self._assembler.recover_frames(expected_count=None)
        if packets is None:
            raise NoPacketReceivedError(f"Stream went idle before any answer to '{command}'.")
        return packets

    @staticmethod
    def _require_payload(packet: Packet, length: int, what: str) -> bytes:
        payload = packet.payload
        if len(payload) < length:
            raise FrameParseError(
                f"{what} payload needs {length} byte(s), got {len(payload)}.",
                frame_part=packet.raw
            )
        return payload

    # --- Module information ---

    def get_module_info_details(self) -> ModuleInfo:
        """
        Queries hardware version, software version and manufacturer in turn.

        Raises:
            NoPacketReceivedError: If any of the three answers is missing.
        """
        hardware = self._request_one(commands.HardwareVersion())
        software = self._request_one(commands.SoftwareVersion())
        manufacturer = self._request_one(commands.Manufacturer())
        return ModuleInfo(
            hardware_version=str(hardware),
            software_version=str(software),
            manufacturer=str(manufacturer),
        )

    def get_module_info(self) -> str:
        """Returns "Hardware: .. - Software: .. - Manufacturer: .."."""
        return str(self.get_module_info_details())

    # --- Regulatory settings ---

    def get_working_area(self) -> WorkingArea:
        """
        Get the regulatory working area configured on the module.

        Raises:
            InvalidWorkingAreaError: If the module reports an unknown area code.
            NoPacketReceivedError: If nothing is received.
        """
        packet = self._request_one(commands.GetWorkingArea())
        payload = self._require_payload(packet, 1, "Working area")
        return WorkingArea.from_code(payload[0])

    def get_working_channel(self) -> float:
        """
        Get the current working RF channel as a frequency in MHz.

        The channel index reported by the module is converted with the step
        and base frequency of the working area, which is queried right after.
        """
        packet = self._request_one(commands.GetWorkingChannel())
        payload = self._require_payload(packet, 1, "Working channel")
        channel_index = payload[0]
        area = self.get_working_area()
        frequency = area.channel_frequency(channel_index)
        logger.debug(f"Channel {channel_index} in area {area} is {frequency} MHz")
        return frequency

    # --- Transmit power ---

    def get_transmit_power(self) -> float:
        """Read the transmit power; the module reports it in hundredths."""
        packet = self._request_one(commands.AcquireTransmitPower())
        payload = self._require_payload(packet, 2, "Transmit power")
        (raw_power,) = struct.unpack_from('>H', payload)
        return raw_power / float(r200_const.POWER_SCALE)

    def set_transmission_power(self, power: float) -> None:
        """
        Set the transmitter output power.

        Raises:
            ValueError: If ``power`` does not fit the 16-bit wire field.
            NoPacketReceivedError: If no acknowledgement, or a negative one, is received.
        """
        packet = self._request_one(commands.SetTransmissionPower(power))
        payload = packet.payload
        if payload[0] != r200_const.ACK_SUCCESS:
            raise NoPacketReceivedError(
                f"Transmit power {power} not acknowledged (status 0x{payload[0]:02X}).",
                packet=packet.raw
            )
        logger.info(f"Power correctly set to {power}")

    # --- Inventory ---

    def single_polling_instruction(self) -> List[TagRecord]:
        """
        Perform a single inventory round and return the detected tags.

        Returns:
            A possibly empty list of TagRecord.

        Raises:
            TimeoutError: If the module did not answer at all.
            NoPacketReceivedError: If the stream went idle or closed without an answer.
            FrameParseError: If a tag payload is too short.
        """
        command = commands.SinglePollingInstruction()
        self.send_command(command)
        packets = self._recover_burst(command)
        tags = self._parse_tags(packets)
        logger.info(f"Tags received: {len(tags)}")
        return tags

    def multi_polling_instruction(self, max_count: int = r200_const.DEFAULT_MULTI_POLL_COUNT) -> List[TagRecord]:
        """
        Start a multiple polling burst and collect tags until the module goes quiet.

        The same tag usually appears many times in one burst; put the result
        in a ``set`` to keep one TagRecord per EPC.

        Raises:
            TimeoutError: If the module did not answer at all.
            NoPacketReceivedError: If the stream went idle or closed without an answer.
        """
        command = commands.MultiplePollingInstruction(max_count)
        self.send_command(command)
        packets = self._recover_burst(command)
        tags = self._parse_tags(packets)
        logger.info(f"Tags received in burst: {len(tags)}")
        return tags

    def stop_multiple_polling_instructions(self) -> None:
        """Stop a running multiple polling burst. No answer is awaited."""
        self.send_command(commands.StopMultiplePollingInstruction())

    def drain_input(self) -> int:
        """
        Discards whatever the module still sends until it goes quiet.

        Call it after ``stop_multiple_polling_instructions`` when the module
        may acknowledge the stop or still be finishing a burst, so the next
        request is not paired with a stale reply.
        """
        return self._assembler.drain()

    @staticmethod
    def _parse_tags(packets: List[Packet]) -> List[TagRecord]:
        # A lone "no tag" answer means an empty inventory
        if len(packets) == 1 and packets[0].payload[0] == r200_const.NO_TAG_SENTINEL:
            logger.debug("No tag in range.")
            return []
        tags = []
        for packet in packets:
            logger.debug(f"Tag payload: {packet.payload.hex(' ').upper()}")
            tags.append(TagRecord.from_payload(packet.payload))
        return tags
