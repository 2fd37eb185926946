import base64
import hashlib
import string
from urllib.parse import unquote

import pytest

from authlink.codec.envelope import decode, parse_envelope
from authlink.codec.options import ObfuscationOptions
from authlink.verify.cooldown import CooldownActiveError, CooldownTracker
from authlink.verify.link_hash import (
    build_link,
    compute_link_hash,
    generate_token,
    issue_link,
)

T = 1700000000000
PAYLOAD_JSON = '{"uuid":"abc","action":"login","player_uuid":"p1","expires_time":1}'


@pytest.mark.unit
def test_compute_link_hash_matches_sha256_of_concatenation():
    expected = hashlib.sha256(b"eyJ1dWlkIjoiYWJjIn0=" + b"TOKEN" + b"abc123").hexdigest()

    assert compute_link_hash("eyJ1dWlkIjoiYWJjIn0=", "TOKEN") == expected
    assert compute_link_hash("eyJ1dWlkIjoiYWJjIn0=", "TOKEN", "pepper") != expected


@pytest.mark.unit
def test_generate_token_length_and_charset():
    token = generate_token(32)

    assert len(token) == 32
    assert set(token) <= set(string.ascii_letters + string.digits)
    assert len(generate_token()) == 12


@pytest.mark.unit
def test_build_link_fills_placeholders():
    link = build_link(
        "https://example.com/verify?data={data}&hash={hash}&token={token}",
        "ab+/=",
        "deadbeef",
        "tok",
    )

    assert link == "https://example.com/verify?data=ab%2B%2F%3D&hash=deadbeef&token=tok"


@pytest.mark.unit
def test_issue_link_produces_consistent_parts():
    options = ObfuscationOptions()
    payload_json = '{"uuid":"abc","action":"login","player_uuid":"p1","expires_time":1}'

    issued = issue_link(payload_json, T, options, salt="s", token_length=8)

    assert len(issued.token) == 8
    assert issued.plain_base64 == base64.b64encode(payload_json.encode()).decode()
    assert issued.link_hash == compute_link_hash(issued.plain_base64, issued.token, "s")
    assert parse_envelope(issued.data).timestamp_millis == T
    assert decode(issued.data, options).text == issued.plain_base64
    assert unquote(issued.link.split("data=")[1].split("&")[0]) == issued.data


@pytest.mark.unit
def test_issue_link_honours_cooldown():
    now = [T]
    cooldown = CooldownTracker(cooldown_seconds=120, clock=lambda: now[0])
    options = ObfuscationOptions()

    issue_link(PAYLOAD_JSON, T, options, cooldown=cooldown, player_uuid="p1", action="login")

    with pytest.raises(CooldownActiveError) as exc_info:
        issue_link(PAYLOAD_JSON, T, options, cooldown=cooldown, player_uuid="p1", action="login")
    assert exc_info.value.remaining_seconds == 120

    issue_link(PAYLOAD_JSON, T, options, cooldown=cooldown, player_uuid="p1", action="bind")

    now[0] += 120 * 1000
    issue_link(PAYLOAD_JSON, T, options, cooldown=cooldown, player_uuid="p1", action="login")


@pytest.mark.unit
def test_issue_link_cooldown_requires_player_and_action():
    with pytest.raises(ValueError):
        issue_link(PAYLOAD_JSON, T, ObfuscationOptions(), cooldown=CooldownTracker(), action="login")
