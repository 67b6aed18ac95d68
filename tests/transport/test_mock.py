# tests/transport/test_mock.py

import pytest

from r200_uhf.core.exceptions import TimeoutError, TransportError, ReadError
from r200_uhf.transport.mock import MockTransport


@pytest.fixture
def transport() -> MockTransport:
    mock = MockTransport(name="MockTest")
    mock.connect()
    return mock


def test_requires_connection():
    mock = MockTransport()
    with pytest.raises(TransportError):
        mock.write_all(b'\x00')
    with pytest.raises(TransportError):
        mock.read(1)

def test_sent_frames_recorded_on_flush(transport):
    transport.write_all(b'\xAA\x00')
    transport.write_all(b'\x28\x00\x00\x28\xDD')
    assert transport.get_sent_data() is None
    transport.flush()
    assert transport.get_sent_data() == b'\xAA\x00\x28\x00\x00\x28\xDD'

def test_reads_follow_script(transport):
    transport.add_response(b'\x01\x02')
    transport.add_idle()
    transport.add_timeout()
    transport.add_error(ReadError("boom"))
    assert transport.read(10) == b'\x01\x02'
    assert transport.read(10) == b''
    with pytest.raises(TimeoutError):
        transport.read(10)
    with pytest.raises(ReadError):
        transport.read(10)
    with pytest.raises(TimeoutError):
        transport.read(10)

def test_read_splits_large_chunks(transport):
    transport.add_response(b'\x01\x02\x03\x04\x05')
    assert transport.read(2) == b'\x01\x02'
    assert transport.read(2) == b'\x03\x04'
    assert transport.read(2) == b'\x05'
    assert transport.pending_reads() == 0

def test_clear_queues(transport):
    transport.add_responses([b'\x01', b'\x02'])
    transport.write_all(b'\x03')
    transport.flush()
    transport.clear_response_queue()
    transport.clear_send_queue()
    assert transport.pending_reads() == 0
    assert transport.get_all_sent_data() == []
