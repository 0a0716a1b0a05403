# dispatchbus

A small publish/subscribe dispatcher. Publishers and subscribers send
fixed-header messages over UDP to a central dispatcher. Optional payload
fields travel as type-length-value (TLV) records after the header. The
package also holds an in-memory registry of publishers, subscribers and
subscriptions.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install .[test]
pytest
```

## Running the dispatcher

```
dispatchbus
dispatchbus --host 127.0.0.1 --port 40000
```

The dispatcher binds a UDP socket (by default `127.0.0.1:40000`) and
listens on a background thread, which keeps the process running. For each
publisher or subscriber message it receives, it prints who sent it and a
one-line dump of the message. Datagrams that are not well-formed messages
are reported and dropped; messages of other directions are ignored. If the
socket cannot be created or bound, the command prints an error and exits
with status 1.

## Modules

- `dispatchbus.tlv`: `encode_tlv(tlv_type, data)` builds one record (one
  type byte, one length byte, then the value); `iter_tlvs(buffer)` yields
  `(type, value)` pairs and raises `ValueError` on a truncated buffer;
  `find_tlv(buffer, tlv_type)` returns the first matching value or `None`.
- `dispatchbus.messages`: the enums `MsgType`, `SubMsgType`, `Priority` and
  `ErrorCode`; the `Dmsg` dataclass with `pack()`, `Dmsg.unpack(data)` and
  `debug_string()`; `prepare_message(...)`, which makes a message with a
  zero-filled TLV buffer; and the name helpers `msg_type_to_string`,
  `sub_msg_type_to_string`, `tlv_name` and `tlv_data_len`.
- `dispatchbus.database`: `DispatcherDB` with its `PublisherEntry`,
  `SubscriberEntry` and `PubSubEntry` records.
- `dispatchbus.dispatcher`: `Dispatcher`, `IdGenerator`,
  `process_publisher_msg`, `process_subscriber_msg` and the `main` command.

## Building messages

```python
from dispatchbus.messages import Dmsg, MsgType, SubMsgType, prepare_message
from dispatchbus.tlv import encode_tlv, find_tlv, iter_tlvs

msg = prepare_message(MsgType.PUB_TO_DISPATCH, SubMsgType.REGISTER, 0, 0)
msg.tlv_buffer = encode_tlv(1, b"sensor-feed")
wire = msg.pack()
same = Dmsg.unpack(wire)
print(same.debug_string())

for tlv_type, value in iter_tlvs(same.tlv_buffer):
    print(tlv_type, value)
print(find_tlv(same.tlv_buffer, 1))
```

`publisher_id` and `subscriber_id` on a `Dmsg` are two names for the same
field, `peer_id`.

## Keeping track of publishers and subscribers

```python
from dispatchbus.database import DispatcherDB

db = DispatcherDB()
db.create_publisher(1, "weather")
db.publish_msg(1, 100)
db.create_subscriber(7, "dashboard")
db.subscribe_msg(7, 100)
print(db.pubsub_get(100))
print(db.display())
```

Creating a publisher or subscriber whose id is taken raises `ValueError`;
deleting an unknown publisher raises `KeyError`. Each publisher may publish,
and each subscriber subscribe to, at most 10 message ids; beyond that
`publish_msg` and `subscribe_msg` return `False`. Deleting a subscriber
also removes its subscriptions.

## Embedding the dispatcher

`Dispatcher(host, port, out)` can be used from your own code:
`handle_datagram(data)` processes one raw datagram and returns reply bytes
or `None`, `serve(sock)` runs the receive loop on a socket you supply until
it times out or is closed, and `start()` binds the socket and runs the loop
on a new thread, which it returns. Log lines go to `out`, or to standard
output by default. `IdGenerator().next_id()` hands out increasing ids
starting at 1.

## What it does not do

The dispatcher only receives and logs. `process_publisher_msg` and
`process_subscriber_msg` return no reply, so no datagram is ever sent back,
and the dispatcher does not update a `DispatcherDB` or forward data
messages to subscribers. There is no client for publishers or subscribers,
and the registry is held in memory only.