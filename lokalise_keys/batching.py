"""Splitting of the key list into request-sized batches."""
from typing import List, Sequence, TypeVar

# Lokalise accepts at most this many keys in one "create keys" request.
MAX_KEYS_PER_REQUEST = 500

T = TypeVar("T")


def split_into_batches(entries: Sequence[T], batch_size: int = MAX_KEYS_PER_REQUEST) -> List[List[T]]:
    """
    Split entries into consecutive batches of at most ``batch_size`` items.

    Args:
        entries: The items to split, in submission order.
        batch_size: Maximum number of items per batch.

    Returns:
        A list of batches preserving the original order. Empty input yields
        an empty list.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    return [list(entries[i:i + batch_size]) for i in range(0, len(entries), batch_size)]
