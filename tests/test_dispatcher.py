import io
import socket

import pytest

from dispatchbus.dispatcher import (
    Dispatcher,
    IdGenerator,
    main,
    process_publisher_msg,
    process_subscriber_msg,
)
from dispatchbus.messages import Dmsg, MsgType, SubMsgType
from dispatchbus.tlv import encode_tlv


def _msg(msg_type, peer_id=0, tlv=b""):
    return Dmsg(
        msg_type=msg_type,
        sub_msg_type=SubMsgType.REGISTER,
        peer_id=peer_id,
        tlv_buffer=tlv,
    )


def test_id_generator_starts_at_one_and_increments():
    gen = IdGenerator()
    assert [gen.next_id() for _ in range(3)] == [1, 2, 3]


def test_id_generators_are_independent():
    first, second = IdGenerator(), IdGenerator()
    first.next_id()
    first.next_id()
    assert second.next_id() == 1


def test_process_functions_produce_no_reply():
    msg = _msg(MsgType.PUB_TO_DISPATCH)
    data = msg.pack()
    assert process_publisher_msg(msg, len(data)) is None
    assert process_subscriber_msg(msg, len(data)) is None


def test_handle_known_publisher():
    out = io.StringIO()
    reply = Dispatcher(out=out).handle_datagram(_msg(MsgType.PUB_TO_DISPATCH, 5).pack())
    assert reply is None
    lines = out.getvalue().splitlines()
    assert lines[0] == "Dispatcher: Received message from publisher ID: 5"
    assert lines[1] == _msg(MsgType.PUB_TO_DISPATCH, 5).debug_string()


def test_handle_new_publisher():
    out = io.StringIO()
    Dispatcher(out=out).handle_datagram(_msg(MsgType.PUB_TO_DISPATCH).pack())
    assert out.getvalue().splitlines()[0] == "Dispatcher: Received message from new Publisher"


def test_handle_subscriber_messages():
    out = io.StringIO()
    dispatcher = Dispatcher(out=out)
    dispatcher.handle_datagram(_msg(MsgType.SUB_TO_DISPATCH, 9).pack())
    dispatcher.handle_datagram(_msg(MsgType.SUB_TO_DISPATCH).pack())
    lines = out.getvalue().splitlines()
    assert lines[0] == "Dispatcher: Received message from subscriber ID: 9"
    assert lines[2] == "Dispatcher: Received message from new Subscriber"


def test_handle_other_directions_ignored():
    out = io.StringIO()
    dispatcher = Dispatcher(out=out)
    assert dispatcher.handle_datagram(_msg(MsgType.DISPATCH_TO_SUB, 1).pack()) is None
    assert out.getvalue() == ""


def test_handle_short_datagram_raises():
    with pytest.raises(ValueError):
        Dispatcher(out=io.StringIO()).handle_datagram(b"\x01\x02")


def test_serve_processes_until_timeout():
    out = io.StringIO()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as server, socket.socket(
        socket.AF_INET, socket.SOCK_DGRAM
    ) as client:
        server.bind(("127.0.0.1", 0))
        server.settimeout(0.5)
        address = server.getsockname()
        client.sendto(b"junk", address)
        message = _msg(MsgType.PUB_TO_DISPATCH, tlv=encode_tlv(1, b"pub-a"))
        client.sendto(message.pack(), address)
        Dispatcher(out=out).serve(server)
    text = out.getvalue()
    assert "Dispatcher Error: Malformed message dropped" in text
    assert "Dispatcher: Received message from new Publisher" in text
    assert "TLV Value : pub-a" in text


def test_start_fails_on_busy_port():
    out = io.StringIO()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as taken:
        taken.bind(("127.0.0.1", 0))
        port = taken.getsockname()[1]
        with pytest.raises(OSError):
            Dispatcher(host="127.0.0.1", port=port, out=out).start()
    assert "Dispatcher Error: Socket bind failed" in out.getvalue()


def test_main_returns_error_on_busy_port(capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as taken:
        taken.bind(("127.0.0.1", 0))
        port = taken.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1
    assert "Dispatcher Error: Socket bind failed" in capsys.readouterr().out