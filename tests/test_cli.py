# tests/test_cli.py
from unittest.mock import MagicMock, patch

import pytest

from r200_uhf import cli
from r200_uhf.core.exceptions import TimeoutError
from r200_uhf.core.session import ProtocolSession
from r200_uhf.protocols.r200.records import TagRecord, WorkingArea
from r200_uhf.utils.serial_scanner import PortInfo

EPC_A = bytes.fromhex("E2000017021701992390217D")
EPC_B = bytes.fromhex("E28068940000400A12345678")


@pytest.fixture
def mock_session():
    session = MagicMock(spec=ProtocolSession)
    session.get_module_info.return_value = "Hardware: V1.0 - Software: V2.3 - Manufacturer: Magic"
    session.get_working_area.return_value = WorkingArea.EU
    session.get_working_channel.return_value = 865.9
    session.get_transmit_power.return_value = 20.0
    session.multi_polling_instruction.side_effect = [
        [TagRecord(0xC9, 0x3000, EPC_A, 0x1234), TagRecord(0xC5, 0x3000, EPC_A, 0x5678)],
        [TagRecord(0xC0, 0x3000, EPC_B, 0x9ABC)],
    ]
    return session


def test_run_stops_burst_sets_power_and_dedups(mock_session, capsys):
    unique = cli.run(mock_session, power=23.6, sequences=2, max_count=50)
    mock_session.stop_multiple_polling_instructions.assert_called_once()
    mock_session.drain_input.assert_called_once()
    mock_session.set_transmission_power.assert_called_once_with(23.6)
    assert mock_session.multi_polling_instruction.call_count == 2
    assert {tag.epc for tag in unique} == {EPC_A, EPC_B}
    assert "TOTAL: 2" in capsys.readouterr().out

def test_run_keeps_matching_power(mock_session):
    mock_session.get_transmit_power.return_value = 23.6
    cli.run(mock_session, power=23.6, sequences=0, max_count=50)
    mock_session.set_transmission_power.assert_not_called()

def test_main_without_port():
    assert cli.main([]) == 1

def test_main_list_ports(capsys):
    ports = [PortInfo(device="/dev/ttyUSB0", description="CP2102", hwid="")]
    with patch.object(cli, "scan_serial_ports", return_value=ports) as scan:
        assert cli.main(["--list-ports"]) == 0
    scan.assert_called_once_with(check_access=True)
    assert "/dev/ttyUSB0 - CP2102" in capsys.readouterr().out

def test_main_reports_reader_error(mock_session):
    mock_session.__enter__.return_value = mock_session
    mock_session.stop_multiple_polling_instructions.side_effect = TimeoutError()
    with patch.object(cli.ProtocolSession, "open_serial", return_value=mock_session) as open_serial:
        assert cli.main(["/dev/ttyUSB0", "57600", "--timeout", "0.3"]) == 2
    open_serial.assert_called_once_with({'port': '/dev/ttyUSB0', 'baudrate': 57600, 'timeout': 0.3})
