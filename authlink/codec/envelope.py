"""
Envelope codec for obfuscated link payloads.

An obfuscated payload travels as base64 of the text
``{"data":"<payload>","time":<millis>}``. The timestamp selects the rotation
window, so the decoder can rebuild the table the encoder used without any
side channel. Payloads without the envelope predate table rotation and are
decoded with the unrotated table.
"""

import base64
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from authlink.codec.mapping import build_mapping, substitute
from authlink.codec.options import ObfuscationOptions
from authlink.codec.shift import apply_shift, reverse_shift
from authlink.codec.table_rotator import rotate_table

logger = logging.getLogger(__name__)

_ENVELOPE_PATTERN = re.compile(r'\{"data":"([^"]+)","time":([0-9]+)\}')

_DEFAULT_OPTIONS = ObfuscationOptions()


class DecodeError(ValueError):
    """Raised when a payload cannot be decoded by either path."""
    pass


class DecodePath(Enum):
    """Which branch of the decoder produced a result."""
    ENVELOPE = "envelope"
    LEGACY = "legacy"


@dataclass(frozen=True)
class Envelope:
    """Obfuscated payload plus the timestamp it was encoded at."""
    payload: str
    timestamp_millis: int


@dataclass(frozen=True)
class DecodeResult:
    """
    Outcome of decode().

    timestamp_millis is the envelope timestamp, or None for legacy payloads.
    On the legacy path `text` is always the fully decoded plaintext.
    """
    text: str
    path: DecodePath
    timestamp_millis: Optional[int] = None


def _b64decode_text(text: str) -> str:
    """Standard base64 decode into UTF-8 text, raising ValueError on failure."""
    return base64.b64decode(text).decode('utf-8')


def _b64encode_text(text: str) -> str:
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


def parse_envelope(raw: str) -> Optional[Envelope]:
    """
    Unwrap the envelope around an obfuscated payload.

    Args:
        raw: Text as received from the link

    Returns:
        The Envelope, or None if the input does not decode to an exact
        ``{"data":"...","time":...}`` record
    """
    try:
        text = _b64decode_text(raw)
    except ValueError:
        return None

    match = _ENVELOPE_PATTERN.fullmatch(text)
    if not match:
        return None

    return Envelope(payload=match.group(1), timestamp_millis=int(match.group(2)))


def _decode_envelope(envelope: Envelope, options: ObfuscationOptions) -> Optional[str]:
    table = rotate_table(
        envelope.timestamp_millis,
        options.obfuscation_table,
        options.rotation_period_seconds
    )
    mapping = build_mapping(table)
    unshifted = reverse_shift(substitute(envelope.payload, mapping.inverse), options.shift)

    if not options.decode_base64:
        return unshifted

    try:
        return _b64decode_text(unshifted)
    except ValueError:
        return None


def _decode_legacy(raw: str, options: ObfuscationOptions) -> str:
    mapping = build_mapping(options.obfuscation_table)
    unshifted = reverse_shift(substitute(raw, mapping.inverse), options.shift)

    try:
        return _b64decode_text(unshifted)
    except ValueError as e:
        raise DecodeError(f"Cannot decode legacy payload: {e}") from e


def decode(raw: str, options: ObfuscationOptions = _DEFAULT_OPTIONS) -> DecodeResult:
    """
    Recover the text behind an obfuscated payload.

    Enveloped payloads are decoded with the table rotated for the embedded
    timestamp. Anything that fails on that path, including the optional
    final base64 decode, is retried as a legacy payload: the whole input is
    decoded with the unrotated table and always base64 decoded, whatever
    options.decode_base64 says.

    Args:
        raw: Obfuscated payload
        options: Shared obfuscation settings

    Returns:
        DecodeResult tagged with the path taken

    Raises:
        DecodeError: If the legacy path cannot decode the input either
    """
    envelope = parse_envelope(raw)

    if envelope is not None:
        text = _decode_envelope(envelope, options)
        if text is not None:
            return DecodeResult(
                text=text,
                path=DecodePath.ENVELOPE,
                timestamp_millis=envelope.timestamp_millis
            )
        logger.debug("Final base64 decode failed for enveloped payload, trying legacy format")
    else:
        logger.debug("Payload has no envelope, trying legacy format")

    return DecodeResult(text=_decode_legacy(raw, options), path=DecodePath.LEGACY)


def deobfuscate(raw: str, options: ObfuscationOptions = _DEFAULT_OPTIONS) -> str:
    """Decode and return only the recovered text."""
    return decode(raw, options).text


def encode(
    plaintext: str,
    timestamp_millis: int,
    options: ObfuscationOptions = _DEFAULT_OPTIONS
) -> str:
    """
    Obfuscate plaintext and wrap it in an envelope.

    Args:
        plaintext: Text to protect
        timestamp_millis: Encoding time; selects the rotation window
        options: Shared obfuscation settings

    Returns:
        Base64 envelope carrying the obfuscated payload
    """
    table = rotate_table(
        timestamp_millis,
        options.obfuscation_table,
        options.rotation_period_seconds
    )
    mapping = build_mapping(table)
    shifted = apply_shift(_b64encode_text(plaintext), options.shift)
    payload = substitute(shifted, mapping.forward)

    return _b64encode_text(f'{{"data":"{payload}","time":{timestamp_millis}}}')


def encode_legacy(plaintext: str, options: ObfuscationOptions = _DEFAULT_OPTIONS) -> str:
    """Obfuscate plaintext with the unrotated table and no envelope."""
    mapping = build_mapping(options.obfuscation_table)
    shifted = apply_shift(_b64encode_text(plaintext), options.shift)
    return substitute(shifted, mapping.forward)
