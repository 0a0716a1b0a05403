"""UDP dispatcher that receives messages from publishers and subscribers."""

from __future__ import annotations

import argparse
import socket
import threading
from typing import TextIO

from .messages import DISPATCHER_IP_ADDR, DISPATCHER_UDP_PORT, Dmsg, MsgType

DISPATCH_RECV_Q_MAX_MSG_SIZE = 2048
_UINT32_MASK = 0xFFFFFFFF


class IdGenerator:
    """Hands out increasing 32-bit ids, starting at 1."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Return the next id."""
        with self._lock:
            self._last = (self._last + 1) & _UINT32_MASK
            return self._last


def process_publisher_msg(msg: Dmsg, bytes_read: int) -> Dmsg | None:
    """Return the reply due to a publisher message, or None.

    The dispatcher sends no reply to publisher messages.
    """
    return None


def process_subscriber_msg(msg: Dmsg, bytes_read: int) -> Dmsg | None:
    """Return the reply due to a subscriber message, or None.

    The dispatcher sends no reply to subscriber messages.
    """
    return None


class Dispatcher:
    """Listens on a UDP socket and answers publisher and subscriber messages."""

    def __init__(
        self,
        host: str = DISPATCHER_IP_ADDR,
        port: int = DISPATCHER_UDP_PORT,
        out: TextIO | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self._out = out

    def _log(self, text: str) -> None:
        print(text, file=self._out)

    def handle_datagram(self, data: bytes) -> bytes | None:
        """Process one received datagram and return the reply bytes, if any.

        Raises ValueError if the datagram is not a well-formed message.
        """
        msg = Dmsg.unpack(data)
        if msg.msg_type == MsgType.PUB_TO_DISPATCH:
            if msg.publisher_id:
                self._log(
                    f"Dispatcher: Received message from publisher ID: {msg.publisher_id}"
                )
            else:
                self._log("Dispatcher: Received message from new Publisher")
            self._log(msg.debug_string())
            reply = process_publisher_msg(msg, len(data))
        elif msg.msg_type == MsgType.SUB_TO_DISPATCH:
            if msg.subscriber_id:
                self._log(
                    f"Dispatcher: Received message from subscriber ID: {msg.subscriber_id}"
                )
            else:
                self._log("Dispatcher: Received message from new Subscriber")
            self._log(msg.debug_string())
            reply = process_subscriber_msg(msg, len(data))
        else:
            return None
        return reply.pack() if reply is not None else None

    def serve(self, sock: socket.socket) -> None:
        """Handle datagrams from ``sock`` until it times out or is closed."""
        while True:
            try:
                data, client_addr = sock.recvfrom(DISPATCH_RECV_Q_MAX_MSG_SIZE)
            except OSError:
                return
            try:
                reply = self.handle_datagram(data)
            except ValueError as exc:
                self._log(f"Dispatcher Error: Malformed message dropped: {exc}")
                continue
            if reply is None:
                continue
            try:
                sock.sendto(reply, client_addr)
            except OSError:
                self._log("Dispatcher Error: Feedback reply to publisher failed")

    def _serve_and_close(self, sock: socket.socket) -> None:
        with sock:
            self.serve(sock)

    def start(self) -> threading.Thread:
        """Bind the listener socket and serve it on a new thread.

        Raises OSError if the socket cannot be created or bound.
        """
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        except OSError:
            self._log("Dispatcher Error: Listener socket creation failed")
            raise
        try:
            sock.bind((self.host, self.port))
        except OSError:
            self._log("Dispatcher Error: Socket bind failed")
            sock.close()
            raise
        self._log("Dispatcher: Listening for requests...")
        thread = threading.Thread(
            target=self._serve_and_close, args=(sock,), name="dispatcher-udp-listener"
        )
        thread.start()
        return thread


def main(argv: list[str] | None = None) -> int:
    """Start the dispatcher; the listener thread keeps the process alive."""
    parser = argparse.ArgumentParser(prog="dispatchbus", description="Run the dispatcher.")
    parser.add_argument("--host", default=DISPATCHER_IP_ADDR)
    parser.add_argument("--port", type=int, default=DISPATCHER_UDP_PORT)
    args = parser.parse_args(argv)
    try:
        Dispatcher(host=args.host, port=args.port).start()
    except OSError:
        return 1
    return 0