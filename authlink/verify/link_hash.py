"""Link tokens, link hashes and link assembly."""

import base64
import hashlib
import secrets
import string
from urllib.parse import quote
from dataclasses import dataclass
from typing import Optional

from authlink.codec.envelope import encode
from authlink.codec.options import ObfuscationOptions
from authlink.verify.cooldown import CooldownTracker

DEFAULT_SALT = "abc123"
DEFAULT_TOKEN_LENGTH = 12
DEFAULT_ENDPOINT = "https://example.com/verify?data={data}&hash={hash}"

_TOKEN_CHARS = string.ascii_uppercase + string.ascii_lowercase + string.digits


@dataclass
class IssuedLink:
    """Everything produced when a link is issued."""
    link: str
    data: str
    link_hash: str
    token: str
    plain_base64: str


def generate_token(length: int = DEFAULT_TOKEN_LENGTH) -> str:
    """
    Generate a random alphanumeric record token.

    Args:
        length: Number of characters

    Returns:
        Token string
    """
    return ''.join(secrets.choice(_TOKEN_CHARS) for _ in range(length))


def compute_link_hash(plain_base64: str, token: str, salt: str = DEFAULT_SALT) -> str:
    """
    Hash binding a payload to the token stored with its record.

    Args:
        plain_base64: Standard base64 of the payload JSON (not obfuscated)
        token: Per-record secret token
        salt: Deployment-wide salt

    Returns:
        Lowercase hex SHA-256 of plain_base64 + token + salt
    """
    digest = hashlib.sha256((plain_base64 + token + salt).encode('utf-8'))
    return digest.hexdigest()


def build_link(endpoint: str, data: str, link_hash: str, token: str = "") -> str:
    """
    Fill the {data}, {hash} and {token} placeholders of an endpoint template.

    The data value is percent-encoded since base64 carries + / and =.
    """
    return (
        endpoint.replace("{data}", quote(data, safe=""))
        .replace("{hash}", link_hash)
        .replace("{token}", token)
    )


def issue_link(
    payload_json: str,
    timestamp_millis: int,
    options: ObfuscationOptions,
    salt: str = DEFAULT_SALT,
    endpoint: str = DEFAULT_ENDPOINT,
    token_length: int = DEFAULT_TOKEN_LENGTH,
    cooldown: Optional[CooldownTracker] = None,
    player_uuid: Optional[str] = None,
    action: Optional[str] = None
) -> IssuedLink:
    """
    Obfuscate a payload and build the verification link for it.

    The caller stores `token` with the record; only `link` goes to the user.

    Args:
        payload_json: Serialized AuthPayload
        timestamp_millis: Issue time, selects the rotation window
        options: Shared obfuscation settings
        salt: Deployment-wide salt
        endpoint: Link template
        token_length: Length of the generated record token
        cooldown: Refuses repeated requests per player and action when given
        player_uuid: Requesting player, required with cooldown
        action: Requested action, required with cooldown

    Returns:
        IssuedLink

    Raises:
        CooldownActiveError: If the player requested this action too recently
    """
    if cooldown is not None:
        if not player_uuid or not action:
            raise ValueError("player_uuid and action are required when a cooldown is used")
        cooldown.check_and_record(player_uuid, action)

    token = generate_token(token_length)
    plain_base64 = base64.b64encode(payload_json.encode('utf-8')).decode('ascii')
    data = encode(payload_json, timestamp_millis, options)
    link_hash = compute_link_hash(plain_base64, token, salt)

    return IssuedLink(
        link=build_link(endpoint, data, link_hash, token),
        data=data,
        link_hash=link_hash,
        token=token,
        plain_base64=plain_base64,
    )
