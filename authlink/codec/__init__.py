"""Time-rotated substitution-and-shift codec for base64 payloads."""

from .envelope import (
    DecodeError,
    DecodePath,
    DecodeResult,
    Envelope,
    decode,
    deobfuscate,
    encode,
    encode_legacy,
    parse_envelope,
)
from .mapping import MappingPair, build_mapping, substitute
from .options import (
    DEFAULT_OBFUSCATION_TABLE,
    DEFAULT_ROTATION_PERIOD_SECONDS,
    DEFAULT_SHIFT,
    STANDARD_ALPHABET,
    ObfuscationOptions,
)
from .seeded_random import SeededRandom
from .shift import apply_shift, reverse_shift
from .table_rotator import rotate_table, rotation_bucket

__all__ = [
    'DEFAULT_OBFUSCATION_TABLE',
    'DEFAULT_ROTATION_PERIOD_SECONDS',
    'DEFAULT_SHIFT',
    'STANDARD_ALPHABET',
    'DecodeError',
    'DecodePath',
    'DecodeResult',
    'Envelope',
    'MappingPair',
    'ObfuscationOptions',
    'SeededRandom',
    'apply_shift',
    'build_mapping',
    'decode',
    'deobfuscate',
    'encode',
    'encode_legacy',
    'parse_envelope',
    'reverse_shift',
    'rotate_table',
    'rotation_bucket',
    'substitute',
]
