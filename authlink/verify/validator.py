"""
Verification of incoming authentication links.

Decodes the obfuscated link data, checks the payload has not expired, looks
the record up through a caller-supplied callable, and compares the link
hash against the one rebuilt from the record token.
"""

import base64
import hmac
import json
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from authlink.codec.envelope import DecodeError, DecodePath, decode
from authlink.codec.options import ObfuscationOptions
from authlink.verify.link_hash import DEFAULT_SALT, compute_link_hash

logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """Decoded link data is not a valid auth payload."""
    pass


@dataclass(frozen=True)
class AuthPayload:
    """Decoded content of an authentication link."""
    uuid: str
    action: str
    player_uuid: str
    expires_time: int

    @classmethod
    def from_json(cls, text: str) -> 'AuthPayload':
        """
        Parse a payload from its JSON form.

        Older issuers name the record id ``recordUUID`` instead of ``uuid``;
        both are accepted.

        Raises:
            PayloadError: If the text is not JSON or a field is missing
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Payload is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PayloadError("Payload must be a JSON object")

        if 'uuid' not in data and 'recordUUID' in data:
            data['uuid'] = data['recordUUID']

        missing = [
            name for name in ('uuid', 'action', 'player_uuid', 'expires_time')
            if not data.get(name)
        ]
        if missing:
            raise PayloadError(f"Payload missing fields: {', '.join(missing)}")

        expires_time = data['expires_time']
        if not isinstance(expires_time, int) or isinstance(expires_time, bool):
            raise PayloadError("Payload expires_time must be an integer")

        return cls(
            uuid=str(data['uuid']),
            action=str(data['action']),
            player_uuid=str(data['player_uuid']),
            expires_time=expires_time,
        )

    def to_json(self) -> str:
        """Serialize in field order without whitespace, as issuers do."""
        return json.dumps(
            {
                'uuid': self.uuid,
                'action': self.action,
                'player_uuid': self.player_uuid,
                'expires_time': self.expires_time,
            },
            separators=(',', ':'),
        )


@dataclass
class AuthRecord:
    """Stored record a link refers to."""
    uuid: str
    token: str
    is_used: bool = False


@dataclass
class VerificationResult:
    """Outcome of LinkVerifier.verify()."""
    valid: bool
    error: Optional[str] = None
    payload: Optional[AuthPayload] = None
    record: Optional[AuthRecord] = None


RecordLookup = Callable[[str], Optional[AuthRecord]]
MarkUsed = Callable[[str], bool]


def _now_millis() -> int:
    return int(time.time() * 1000)


class LinkVerifier:
    """
    Verify links produced by issue_link().

    Record storage is not handled here: verify() receives a lookup callable
    mapping a record uuid to its AuthRecord (or None).
    """

    def __init__(
        self,
        options: Optional[ObfuscationOptions] = None,
        salt: str = DEFAULT_SALT,
        clock: Callable[[], int] = _now_millis
    ):
        """
        Initialize verifier.

        Args:
            options: Shared obfuscation settings (decode_base64 is ignored)
            salt: Deployment-wide salt used in link hashes
            clock: Returns the current time in milliseconds
        """
        self.options = replace(options or ObfuscationOptions(), decode_base64=False)
        self.salt = salt
        self.clock = clock

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        clock: Callable[[], int] = _now_millis
    ) -> 'LinkVerifier':
        """Create a verifier from a validated configuration dictionary."""
        from authlink.config.validator import options_from_config

        verification = config.get('verification') or {}
        return cls(
            options=options_from_config(config),
            salt=verification.get('salt', DEFAULT_SALT),
            clock=clock,
        )

    def recover(self, data: str):
        """
        Decode link data into its plain base64 and payload JSON.

        Enveloped data decodes to the plain base64 directly. When that is not
        base64 text the data is decoded again in full, which retries it as a
        legacy payload the same way decode() does. Fully decoded data comes
        back as plaintext, so its base64 is rebuilt.

        Returns:
            Tuple of (plain_base64, payload_json)

        Raises:
            DecodeError: If the data cannot be decoded
        """
        result = decode(data, self.options)

        if result.path is DecodePath.ENVELOPE:
            try:
                return result.text, base64.b64decode(result.text).decode('utf-8')
            except ValueError as e:
                logger.debug(f"Envelope payload is not base64 text ({e}), retrying as legacy")
                result = decode(data, replace(self.options, decode_base64=True))

        payload_json = result.text
        plain_base64 = base64.b64encode(payload_json.encode('utf-8')).decode('ascii')
        return plain_base64, payload_json

    def verify(
        self,
        data: str,
        link_hash: str,
        lookup: RecordLookup,
        mark_used: Optional[MarkUsed] = None
    ) -> VerificationResult:
        """
        Verify an incoming link.

        Args:
            data: Obfuscated data from the link
            link_hash: Hash from the link
            lookup: Returns the stored record for a uuid, or None
            mark_used: Called with the record uuid once the link is accepted,
                so the link cannot be used twice. Returns False when the
                record could not be marked.

        Returns:
            VerificationResult; errors are reported, not raised
        """
        try:
            plain_base64, payload_json = self.recover(data)
            payload = AuthPayload.from_json(payload_json)
        except (DecodeError, PayloadError) as e:
            logger.info(f"Rejected link with unreadable data: {e}")
            return VerificationResult(valid=False, error=f"Invalid link data: {e}")

        if self.clock() > payload.expires_time:
            logger.info(f"Rejected expired link for record {payload.uuid}")
            return VerificationResult(valid=False, error="Link has expired", payload=payload)

        record = lookup(payload.uuid)
        if record is None:
            logger.info(f"Rejected link for unknown record {payload.uuid}")
            return VerificationResult(valid=False, error="Record not found", payload=payload)

        if record.is_used:
            logger.info(f"Rejected link for already used record {payload.uuid}")
            return VerificationResult(
                valid=False, error="Link has already been used", payload=payload, record=record
            )

        expected = compute_link_hash(plain_base64, record.token, self.salt)
        if not hmac.compare_digest(expected.encode('utf-8'), link_hash.encode('utf-8')):
            logger.warning(f"Hash mismatch for record {payload.uuid}")
            return VerificationResult(
                valid=False, error="Hash verification failed", payload=payload, record=record
            )

        logger.debug(f"Verified link for record {payload.uuid} ({payload.action})")

        if mark_used is not None and not mark_used(payload.uuid):
            logger.warning(f"Could not mark record {payload.uuid} as used")

        return VerificationResult(valid=True, payload=payload, record=record)
