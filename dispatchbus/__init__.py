"""A small UDP publish/subscribe dispatcher, its TLV message format and its registry."""

__version__ = "0.1.0"
__all__ = ["database", "dispatcher", "messages", "tlv"]