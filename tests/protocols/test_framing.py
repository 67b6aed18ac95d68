# tests/protocols/test_framing.py

import pytest
from r200_uhf.protocols import framing
from r200_uhf.protocols.framing import Packet
from r200_uhf.protocols.r200 import commands
from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.core.exceptions import ChecksumError, FrameParseError, InvalidCommandError

# --- Test Data ---

def build_response(opcode: int, data: bytes, direction: int = r200_const.DIRECTION_RESPONSE) -> bytes:
    """Builds an inbound frame the way the module does."""
    body = bytes([opcode, len(data) >> 8, len(data) & 0xFF]) + data
    return bytes([r200_const.FRAME_HEADER, direction]) + body + bytes([framing.calculate_checksum(body), r200_const.FRAME_END])

# Hardware version answer carrying "V1.0"
HW_VERSION_RESP_BYTES = bytes.fromhex("AA0103000456312E30ECDD")

# --- Test Cases ---

# 1. Golden request frames
@pytest.mark.parametrize("command, expected_hex", [
    (commands.HardwareVersion(), "AA 00 03 00 01 00 04 DD"),
    (commands.SoftwareVersion(), "AA 00 03 00 01 01 05 DD"),
    (commands.Manufacturer(), "AA 00 03 00 01 02 06 DD"),
    (commands.GetWorkingArea(), "AA 00 08 00 00 08 DD"),
    (commands.GetWorkingChannel(), "AA 00 AA 00 00 AA DD"),
    (commands.AcquireTransmitPower(), "AA 00 B7 00 00 B7 DD"),
    (commands.SetTransmissionPower(26.50), "AA 00 B6 00 02 0A 5A 1C DD"),
    (commands.SinglePollingInstruction(), "AA 00 22 00 00 22 DD"),
    (commands.MultiplePollingInstruction(10000), "AA 00 27 00 02 27 10 60 DD"),
    (commands.StopMultiplePollingInstruction(), "AA 00 28 00 00 28 DD"),
])
def test_build_frame_golden(command, expected_hex):
    """Verify each command produces the documented byte sequence."""
    frame = framing.build_frame(command)
    assert frame == bytes.fromhex(expected_hex)
    assert frame[-2] == framing.calculate_checksum(frame[2:-2])
    assert frame[0] == r200_const.FRAME_HEADER
    assert frame[1] == r200_const.DIRECTION_COMMAND
    assert frame[-1] == r200_const.FRAME_END

@pytest.mark.parametrize("data, expected", [
    (b'', 0x00),
    (bytes([0x03, 0x00, 0x01, 0x00]), 0x04),
    (bytes([0xB6, 0x00, 0x02, 0x0A, 0x5A]), 0x1C),
    (bytes([0xFF, 0xFF, 0x02]), 0x00),
])
def test_calculate_checksum(data, expected):
    assert framing.calculate_checksum(data) == expected

def test_build_frame_power_out_of_range():
    with pytest.raises(ValueError, match="Invalid transmit power"):
        framing.build_frame(commands.SetTransmissionPower(700.0))

def test_build_frame_negative_power():
    with pytest.raises(ValueError, match="Invalid transmit power"):
        framing.build_frame(commands.SetTransmissionPower(-1.0))

# 2. Packet decoding
def test_packet_parses_basic_fields():
    packet = Packet(HW_VERSION_RESP_BYTES)
    assert packet.direction == r200_const.DIRECTION_RESPONSE
    assert packet.opcode == r200_const.CMD_MODULE_INFO
    assert packet.declared_length == 4
    assert packet.payload == b"V1.0"
    assert packet.checksum == 0xEC
    assert packet.raw == HW_VERSION_RESP_BYTES
    assert packet.is_valid()
    assert packet.is_valid(verify_checksum=True)

def test_build_response_matches_reference_bytes():
    assert build_response(r200_const.CMD_MODULE_INFO, b"V1.0") == HW_VERSION_RESP_BYTES

def test_packet_debug_rendering():
    text = Packet(build_response(0x03, b'\x00')).debug()
    assert "Direction: 01" in text
    assert "Opcode: 03" in text
    assert "Length: 1" in text

def test_packet_str_outputs_utf8_payload():
    assert str(Packet(build_response(0x22, b"OK"))) == "OK"

def test_packet_str_handles_invalid_utf8():
    assert str(Packet(build_response(0x22, b'\xFF'))) == "Invalid UTF-8"

def test_packet_invalid_when_declared_length_disagrees():
    # Declares 4 payload bytes but carries 2
    chunk = bytes.fromhex("AA 01 03 00 04 56 31 8F DD")
    packet = Packet(chunk)
    assert not packet.is_valid()
    assert packet.payload == bytes.fromhex("56 31 8F DD")

def test_packet_checksum_not_verified_by_default():
    chunk = bytearray(HW_VERSION_RESP_BYTES)
    chunk[-2] = 0x00
    packet = Packet(bytes(chunk))
    assert packet.is_valid()
    assert not packet.is_valid(verify_checksum=True)
    with pytest.raises(ChecksumError):
        packet.verify_checksum()

def test_packet_too_short_raises_parse_error():
    with pytest.raises(FrameParseError):
        Packet(bytes.fromhex("AA 01 03 DD"))

# 3. Packet -> command mapping
@pytest.mark.parametrize("sub_code, expected_type", [
    (0x00, commands.HardwareVersion),
    (0x01, commands.SoftwareVersion),
    (0x02, commands.Manufacturer),
])
def test_packet_command_module_info_variants(sub_code, expected_type):
    packet = Packet(build_response(r200_const.CMD_MODULE_INFO, bytes([sub_code]), direction=0x00))
    assert isinstance(packet.command(), expected_type)

def test_packet_command_without_payload():
    # The byte after the length field is the checksum here; it is ignored.
    packet = Packet(build_response(r200_const.CMD_GET_WORKING_CHANNEL, b'', direction=0x00))
    assert isinstance(packet.command(), commands.GetWorkingChannel)

def test_packet_command_unknown_opcode():
    packet = Packet(build_response(0x99, b'\x00'))
    with pytest.raises(InvalidCommandError):
        packet.command()
