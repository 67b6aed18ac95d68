# r200_uhf/protocols/r200/constants.py

"""
Constants specific to the R200 UHF RFID module serial protocol.
"""

# --- Frame Structure Constants ---
FRAME_HEADER: int = 0xAA
FRAME_END: int = 0xDD
HEADER_LENGTH = 1
DIRECTION_LENGTH = 1
OPCODE_LENGTH = 1
PARAM_LENGTH_FIELD_LENGTH = 2
CHECKSUM_LENGTH = 1
END_LENGTH = 1
# Bytes before the payload: header, direction, opcode, length (2)
PAYLOAD_OFFSET = HEADER_LENGTH + DIRECTION_LENGTH + OPCODE_LENGTH + PARAM_LENGTH_FIELD_LENGTH
# Bytes after the payload: checksum, end
TRAILER_LENGTH = CHECKSUM_LENGTH + END_LENGTH
# A chunk must be longer than this to be considered a frame candidate
MIN_CHUNK_LENGTH = 4

# --- Direction Constants ---
DIRECTION_COMMAND: int = 0x00  # Host -> module
DIRECTION_RESPONSE: int = 0x01  # Module -> host
DIRECTION_NOTIFICATION: int = 0x02  # Module -> host (inventory results)

# --- Opcode Constants ---
CMD_MODULE_INFO: int = 0x03
CMD_GET_WORKING_AREA: int = 0x08
CMD_SINGLE_POLLING: int = 0x22
CMD_MULTIPLE_POLLING: int = 0x27
CMD_STOP_MULTIPLE_POLLING: int = 0x28
CMD_GET_WORKING_CHANNEL: int = 0xAA
CMD_SET_TRANSMIT_POWER: int = 0xB6
CMD_GET_TRANSMIT_POWER: int = 0xB7

# --- Module Info Sub-codes (first parameter byte of CMD_MODULE_INFO) ---
MODULE_INFO_HARDWARE_VERSION: int = 0x00
MODULE_INFO_SOFTWARE_VERSION: int = 0x01
MODULE_INFO_MANUFACTURER: int = 0x02

# --- Response Payload Constants ---
NO_TAG_SENTINEL: int = 0x15  # Payload byte 0 of an inventory with no tag in range
ACK_SUCCESS: int = 0x00

# --- Tag Payload Layout (inventory notification payload) ---
TAG_RSSI_OFFSET = 0
TAG_PC_OFFSET = 1
TAG_PC_LENGTH = 2
TAG_EPC_OFFSET = TAG_PC_OFFSET + TAG_PC_LENGTH
TAG_EPC_LENGTH = 12
TAG_CRC_OFFSET = TAG_EPC_OFFSET + TAG_EPC_LENGTH
TAG_CRC_LENGTH = 2
TAG_PAYLOAD_MIN_LENGTH = TAG_CRC_OFFSET + TAG_CRC_LENGTH  # 17

# --- Transmit Power ---
POWER_SCALE = 100  # Power travels on the wire as hundredths
MAX_U16 = 0xFFFF

# --- Multiple Polling ---
DEFAULT_MULTI_POLL_COUNT = 10000

# --- Working Area Codes ---
AREA_CHINA_900MHZ: int = 0
AREA_CHINA_800MHZ: int = 1
AREA_US: int = 2
AREA_EU: int = 3
AREA_KOREA: int = 4

# Channel index -> MHz: index * step + base
AREA_CHANNEL_PLAN = {
    AREA_CHINA_900MHZ: (0.25, 920.125),
    AREA_CHINA_800MHZ: (0.25, 840.125),
    AREA_US: (0.50, 902.25),
    AREA_EU: (0.20, 865.1),
    AREA_KOREA: (0.20, 917.1),
}

# --- Frame Assembler Limits ---
READ_CHUNK_SIZE = 1024
BUFFER_HIGH_WATER_MARK = 8192
BUFFER_TRIM_SIZE = 4096
