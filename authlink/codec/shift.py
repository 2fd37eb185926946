"""Cyclic shift over the standard base64 alphabet."""

from authlink.codec.options import STANDARD_ALPHABET

_INDEX = {c: i for i, c in enumerate(STANDARD_ALPHABET)}


def apply_shift(text: str, amount: int) -> str:
    """
    Move every alphabet character `amount` positions along the alphabet.

    Characters outside the alphabet (padding, its sentinel, anything else)
    are left as they are.

    Args:
        text: Input text
        amount: Shift distance, negative to shift left

    Returns:
        Shifted text
    """
    size = len(STANDARD_ALPHABET)
    result = []

    for c in text:
        index = _INDEX.get(c)
        if index is None:
            result.append(c)
        else:
            result.append(STANDARD_ALPHABET[(index + amount) % size])

    return ''.join(result)


def reverse_shift(text: str, amount: int) -> str:
    """Undo apply_shift(text, amount)."""
    return apply_shift(text, -amount)
