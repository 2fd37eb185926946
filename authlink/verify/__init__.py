"""Issuing and verifying authentication links."""

from .cooldown import CooldownActiveError, CooldownTracker
from .link_hash import IssuedLink, build_link, compute_link_hash, generate_token, issue_link
from .validator import AuthPayload, AuthRecord, LinkVerifier, PayloadError, VerificationResult

__all__ = [
    'AuthPayload',
    'AuthRecord',
    'CooldownActiveError',
    'CooldownTracker',
    'IssuedLink',
    'LinkVerifier',
    'PayloadError',
    'VerificationResult',
    'build_link',
    'compute_link_hash',
    'generate_token',
    'issue_link',
]
