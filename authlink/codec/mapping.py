"""Character substitution maps between the standard and obfuscated alphabets."""

from dataclasses import dataclass
from typing import Dict

from authlink.codec.options import PADDING_CHAR, PADDING_SENTINEL, STANDARD_ALPHABET


@dataclass(frozen=True)
class MappingPair:
    """Forward (standard -> obfuscated) and inverse substitution maps."""
    forward: Dict[str, str]
    inverse: Dict[str, str]


def build_mapping(table: str) -> MappingPair:
    """
    Pair each standard alphabet symbol with the table symbol at the same index.

    Positions the table does not cover map a symbol to itself. If the table
    repeats a symbol, the inverse keeps only the last standard symbol
    assigned to it; existing encoders produce the same tables, so this is
    left untouched.

    Args:
        table: Obfuscation table, usually already rotated

    Returns:
        MappingPair with an entry for every alphabet symbol plus padding
    """
    forward = {}
    inverse = {}

    for i, standard_char in enumerate(STANDARD_ALPHABET):
        obfuscated_char = table[i] if i < len(table) else standard_char
        forward[standard_char] = obfuscated_char
        inverse[obfuscated_char] = standard_char

    forward[PADDING_CHAR] = PADDING_SENTINEL
    inverse[PADDING_SENTINEL] = PADDING_CHAR

    return MappingPair(forward=forward, inverse=inverse)


def substitute(text: str, mapping: Dict[str, str]) -> str:
    """Map every character through `mapping`, passing unknown ones through."""
    return ''.join(mapping.get(c, c) for c in text)
