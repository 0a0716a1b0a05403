"""Type-length-value encoding used for the payload of dispatcher messages.

Each record is one type byte, one length byte and then ``length`` bytes
of value.
"""

from __future__ import annotations

from collections.abc import Iterator

TLV_OVERHEAD_SIZE = 2
_MAX_BYTE = 0xFF


def encode_tlv(tlv_type: int, data: bytes) -> bytes:
    """Encode one TLV record holding ``data`` under ``tlv_type``."""
    if not 0 <= tlv_type <= _MAX_BYTE:
        raise ValueError(f"TLV type {tlv_type} does not fit in one byte")
    value = bytes(data)
    if len(value) > _MAX_BYTE:
        raise ValueError(f"TLV value of {len(value)} bytes exceeds {_MAX_BYTE}")
    return bytes((tlv_type, len(value))) + value


def iter_tlvs(buffer: bytes) -> Iterator[tuple[int, bytes]]:
    """Yield ``(type, value)`` for every record in ``buffer``, in order.

    Raises ValueError when the buffer ends in the middle of a record.
    """
    data = bytes(buffer)
    offset = 0
    while offset < len(data):
        if offset + TLV_OVERHEAD_SIZE > len(data):
            raise ValueError(f"truncated TLV header at offset {offset}")
        tlv_type, length = data[offset], data[offset + 1]
        start = offset + TLV_OVERHEAD_SIZE
        end = start + length
        if end > len(data):
            raise ValueError(
                f"TLV at offset {offset} claims {length} bytes, "
                f"only {len(data) - start} remain"
            )
        yield tlv_type, data[start:end]
        offset = end


def find_tlv(buffer: bytes, tlv_type: int) -> bytes | None:
    """Return the value of the first record of ``tlv_type``, or None."""
    for current_type, value in iter_tlvs(buffer):
        if current_type == tlv_type:
            return value
    return None