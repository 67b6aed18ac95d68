# r200_uhf/cli.py
"""Command line demo: query the module, adjust power and run inventory bursts.

This script shows how to:
1. Stop a multiple polling burst a previous run may have left running and
   discard whatever the module still sends.
2. Read module information, working area, channel and transmit power.
3. Set the transmit power when it differs from the requested value.
4. Run several multiple polling bursts, keeping one entry per tag.
"""

import argparse
import logging
import sys
from typing import List, Optional, Set

from r200_uhf.core.exceptions import UhfRfidError
from r200_uhf.core.session import ProtocolSession
from r200_uhf.protocols.r200 import constants as r200_const
from r200_uhf.protocols.r200.records import TagRecord
from r200_uhf.utils.serial_scanner import scan_serial_ports

logger = logging.getLogger("r200_uhf.cli")

# The module works between 15 and 26; 23.6 stays inside the 0.5 W ERP
# limit that applies at 867.9 MHz in Europe.
DEFAULT_POWER = 23.6


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="r200-uhf", description="R200 UHF RFID reader demo")
    parser.add_argument("port", nargs="?", help="Serial port, e.g. /dev/ttyUSB0 or COM3")
    parser.add_argument("baudrate", nargs="?", type=int, default=115200, help="Baud rate (default: 115200)")
    parser.add_argument("--timeout", type=float, default=0.5, help="Read timeout in seconds (default: 0.5)")
    parser.add_argument("--power", type=float, default=DEFAULT_POWER,
                        help=f"Target transmit power (default: {DEFAULT_POWER})")
    parser.add_argument("--sequences", type=int, default=10, help="Number of inventory bursts (default: 10)")
    parser.add_argument("--max-count", type=int, default=r200_const.DEFAULT_MULTI_POLL_COUNT,
                        help="Polling rounds per burst")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--list-ports", action="store_true", help="List serial ports and exit")
    return parser


def print_tags(sequence: int, tags: Set[TagRecord]) -> None:
    print(f"|     SEQUENCE: {sequence}   |")
    print("|     UNIQUE TAGS    |")
    for tag in sorted(tags, key=lambda t: t.epc):
        print(f"| {tag} |")
    print(f"|  TOTAL: {len(tags)}     |")


def run(session: ProtocolSession, power: float, sequences: int, max_count: int) -> Set[TagRecord]:
    session.stop_multiple_polling_instructions()
    session.drain_input()

    logger.info(session.get_module_info())
    logger.info(f"Working area: {session.get_working_area()}")
    logger.info(f"Working channel: {session.get_working_channel()} MHz")

    current_power = session.get_transmit_power()
    logger.info(f"Transmission power {current_power}")
    if current_power != power:
        logger.info(f"Setting transmission power to {power}")
        session.set_transmission_power(power)

    unique_tags: Set[TagRecord] = set()
    for sequence in range(sequences):
        unique_tags.update(session.multi_polling_instruction(max_count))
        print_tags(sequence, unique_tags)
    return unique_tags


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if args.list_ports:
        for port in scan_serial_ports(check_access=True):
            print(port)
        return 0

    if not args.port:
        logger.warning("Usage: r200-uhf <serial-port> [baud]  Example: r200-uhf /dev/ttyUSB0 115200")
        return 1

    logger.info(f"Opening port {args.port} at {args.baudrate} baud...")
    try:
        with ProtocolSession.open_serial({'port': args.port, 'baudrate': args.baudrate,
                                          'timeout': args.timeout}) as session:
            run(session, args.power, args.sequences, args.max_count)
    except UhfRfidError as e:
        logger.error(f"Reader error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
