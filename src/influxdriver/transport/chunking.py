"""
Split a line-protocol payload into datagram-sized chunks.

A chunk boundary only ever falls right after a newline, so no point is cut in
half. A single line longer than the limit travels alone, unsplit.
"""

from __future__ import annotations

from typing import Iterator


def _chunk_end(payload: bytes, start: int, max_size: int) -> int:
    """
    Offset where the chunk beginning at `start` ends.

    Whole lines are accumulated while the chunk stays within `max_size`. An
    unterminated final line counts as a line. If the first line alone exceeds
    `max_size` it is the whole chunk.
    """
    end = start
    limit = start + max_size
    while end < len(payload):
        nl = payload.find(b"\n", end)
        line_end = len(payload) if nl < 0 else nl + 1
        if line_end > limit and end > start:
            break
        end = line_end
        if end > limit:
            break
    return end


def next_chunk(payload: bytes, max_size: int) -> tuple[bytes, bytes]:
    """Take the next chunk off `payload`; returns (head, tail)."""
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")
    end = _chunk_end(payload, 0, max_size)
    return payload[:end], payload[end:]


def iter_chunks(payload: bytes, max_size: int) -> Iterator[bytes]:
    if max_size <= 0:
        raise ValueError(f"max_size must be positive, got {max_size}")
    # Walk an offset over one buffer; only the yielded chunks are copied.
    data = bytes(payload)
    start = 0
    while start < len(data):
        end = _chunk_end(data, start, max_size)
        yield data[start:end]
        start = end


def split_payload(payload: bytes, max_size: int) -> list[bytes]:
    return list(iter_chunks(payload, max_size))
