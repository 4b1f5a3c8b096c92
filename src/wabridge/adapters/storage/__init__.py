"""Storage adapters for the message and event logs."""

from wabridge.adapters.storage.ring_buffer import (
    RingBufferEventStorage,
    RingBufferMessageStorage,
)

__all__ = [
    "RingBufferEventStorage",
    "RingBufferMessageStorage",
]
