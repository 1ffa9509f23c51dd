"""Helpers that drain row and LOB streams."""

from collections.abc import AsyncIterable, Iterable
from typing import Any

__all__ = ("consume_stream", "consume_stream_async")


def consume_stream(stream: "Iterable[Any]") -> int:
    """Read a stream to completion, asserting that every item is truthy.

    Args:
        stream: Iterable to drain, e.g. a cursor or a chunked LOB reader.

    Raises:
        AssertionError: If an item is empty or falsy.

    Returns:
        Number of items consumed.
    """
    count = 0
    for item in stream:
        if not item:
            msg = f"stream item {count} is empty"
            raise AssertionError(msg)
        count += 1
    return count


async def consume_stream_async(stream: "AsyncIterable[Any]") -> int:
    """Async variant of :func:`consume_stream`."""
    count = 0
    async for item in stream:
        if not item:
            msg = f"stream item {count} is empty"
            raise AssertionError(msg)
        count += 1
    return count
