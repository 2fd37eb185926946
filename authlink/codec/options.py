"""Obfuscation settings shared by every codec operation."""

from dataclasses import dataclass

# Standard base64 alphabet, position-indexed 0-63
STANDARD_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

PADDING_CHAR = "="
PADDING_SENTINEL = "_"

# 62 symbols; positions 62 and 63 fall back to '+' and '/'
DEFAULT_OBFUSCATION_TABLE = "jQNHxo9a1zVG8dFcyb27XmiwOl0WULnkPsBKqEAZYfer3t5RMDSCJhgvu4pT-."
DEFAULT_SHIFT = 3
DEFAULT_ROTATION_PERIOD_SECONDS = 86400


@dataclass(frozen=True)
class ObfuscationOptions:
    """
    Immutable obfuscation configuration.

    Both sides of a link (encoder and decoder) must agree on every field
    except decode_base64, which only affects what decode returns.
    """
    shift: int = DEFAULT_SHIFT
    obfuscation_table: str = DEFAULT_OBFUSCATION_TABLE
    rotation_period_seconds: int = DEFAULT_ROTATION_PERIOD_SECONDS
    decode_base64: bool = False
