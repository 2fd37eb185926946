"""Time-bucketed permutation of the obfuscation table."""

from authlink.codec.options import (
    DEFAULT_OBFUSCATION_TABLE,
    DEFAULT_ROTATION_PERIOD_SECONDS,
    STANDARD_ALPHABET,
)
from authlink.codec.seeded_random import SeededRandom


def rotation_bucket(
    timestamp_millis: int,
    rotation_period_seconds: int = DEFAULT_ROTATION_PERIOD_SECONDS
) -> int:
    """
    Index of the rotation window a timestamp falls into.

    Args:
        timestamp_millis: Unix time in milliseconds
        rotation_period_seconds: Window length in seconds

    Returns:
        floor(timestamp / (period * 1000))
    """
    return timestamp_millis // (rotation_period_seconds * 1000)


def rotate_table(
    timestamp_millis: int,
    obfuscation_table: str = DEFAULT_OBFUSCATION_TABLE,
    rotation_period_seconds: int = DEFAULT_ROTATION_PERIOD_SECONDS
) -> str:
    """
    Shuffle the obfuscation table for the window containing a timestamp.

    The result depends only on the three arguments, so either side of a
    link can rebuild it at any time. Nothing is cached between calls.

    Args:
        timestamp_millis: Unix time in milliseconds
        obfuscation_table: Table to permute (only the first 64 symbols are used)
        rotation_period_seconds: Window length in seconds

    Returns:
        The permuted table
    """
    symbols = list(obfuscation_table[:len(STANDARD_ALPHABET)])
    random = SeededRandom(rotation_bucket(timestamp_millis, rotation_period_seconds))

    # Fisher-Yates, last index down to 1
    for i in range(len(symbols) - 1, 0, -1):
        j = random.next_int(i + 1)
        symbols[i], symbols[j] = symbols[j], symbols[i]

    return ''.join(symbols)
