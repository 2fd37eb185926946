"""
Authlink - time-rotated obfuscation for authentication link payloads

Decodes and encodes the short-lived tokens carried in verification link
query strings, and verifies the link hash layered on top of them.
"""

__version__ = "0.3.0"
