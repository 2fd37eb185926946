"""Command-line interface for authlink."""

import sys
import time
import uuid
import logging
import argparse
from dataclasses import replace
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)

from authlink import __version__
from authlink.codec.envelope import DecodeError, decode, encode, encode_legacy
from authlink.codec.mapping import build_mapping
from authlink.codec.options import ObfuscationOptions, STANDARD_ALPHABET
from authlink.codec.table_rotator import rotate_table, rotation_bucket
from authlink.config.loader import load_config, get_config_value, ConfigError
from authlink.config.validator import validate_config, options_from_config, ValidationError
from authlink.verify.cooldown import DEFAULT_COOLDOWN_SECONDS, CooldownActiveError, CooldownTracker
from authlink.verify.link_hash import (
    DEFAULT_ENDPOINT,
    DEFAULT_SALT,
    DEFAULT_TOKEN_LENGTH,
    issue_link,
)
from authlink.verify.validator import AuthPayload, AuthRecord, LinkVerifier

DEFAULT_EXPIRES_IN_SECONDS = 300


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='authlink',
        description='Time-rotated obfuscation for authentication link payloads',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decode link data to the plain base64 payload
  authlink decode eyJkYXRhIjoi...

  # Decode all the way to the payload JSON
  authlink decode --decode-base64 eyJkYXRhIjoi...

  # Show today's rotated table and its mapping
  authlink table --mapping

  # Issue a link and verify it against the printed token
  authlink issue --action login --player-uuid 0f3c...
  authlink verify DATA HASH --token TOKEN
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to config.yaml (default: ./config.yaml if present)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    decode_parser = subparsers.add_parser('decode', help='Decode obfuscated link data')
    decode_parser.add_argument('data', help='Obfuscated data')
    decode_parser.add_argument(
        '--decode-base64',
        action='store_true',
        help='Base64 decode the result once more. Overrides config.'
    )
    decode_parser.set_defaults(handler=_cmd_decode)

    encode_parser = subparsers.add_parser('encode', help='Obfuscate plaintext')
    encode_parser.add_argument('text', help='Plaintext to obfuscate')
    encode_parser.add_argument(
        '--time',
        type=int,
        metavar='MILLIS',
        help='Encoding timestamp in milliseconds (default: now)'
    )
    encode_parser.add_argument(
        '--legacy',
        action='store_true',
        help='Use the unrotated table and no envelope'
    )
    encode_parser.set_defaults(handler=_cmd_encode)

    table_parser = subparsers.add_parser('table', help='Show the rotated table for a timestamp')
    table_parser.add_argument(
        '--time',
        type=int,
        metavar='MILLIS',
        help='Timestamp in milliseconds (default: now)'
    )
    table_parser.add_argument(
        '--mapping',
        action='store_true',
        help='Also print the full substitution mapping'
    )
    table_parser.set_defaults(handler=_cmd_table)

    issue_parser = subparsers.add_parser('issue', help='Issue a verification link')
    issue_parser.add_argument('--action', required=True, help='Action the link authorizes')
    issue_parser.add_argument('--player-uuid', required=True, help='Player the link is for')
    issue_parser.add_argument(
        '--time',
        type=int,
        metavar='MILLIS',
        help='Issue timestamp in milliseconds (default: now)'
    )
    issue_parser.set_defaults(handler=_cmd_issue)

    verify_parser = subparsers.add_parser('verify', help='Verify a link against a record token')
    verify_parser.add_argument('data', help='Obfuscated data from the link')
    verify_parser.add_argument('hash', help='Hash from the link')
    verify_parser.add_argument('--token', required=True, help='Token stored with the record')
    verify_parser.add_argument(
        '--used',
        action='store_true',
        help='Treat the record as already used'
    )
    verify_parser.set_defaults(handler=_cmd_verify)

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging') or {}

    level_str = logging_config.get('level', 'WARNING').upper()
    level = getattr(logging, level_str, logging.WARNING)

    handlers = []

    # Console output goes to stderr so stdout carries only results
    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except (OSError, PermissionError) as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def _now_millis() -> int:
    return int(time.time() * 1000)


# Shared by every issue command run in this process
_cooldown: Optional[CooldownTracker] = None


def _get_cooldown(config: dict) -> CooldownTracker:
    global _cooldown
    if _cooldown is None:
        _cooldown = CooldownTracker(
            get_config_value(config, 'verification.cooldown_seconds', DEFAULT_COOLDOWN_SECONDS)
        )
    else:
        _cooldown.cleanup_expired()
    return _cooldown


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for authlink CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        validate_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)
    options = options_from_config(config)

    try:
        return args.handler(args, config, options)
    except DecodeError as e:
        print(f"Decode error: {e}", file=sys.stderr)
        return 1
    except CooldownActiveError as e:
        print(f"Cooldown: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130


def _cmd_decode(args: argparse.Namespace, config: dict, options: ObfuscationOptions) -> int:
    if args.decode_base64:
        options = replace(options, decode_base64=True)

    result = decode(args.data, options)
    logger.info(f"Decoded {result.path.value} payload")
    print(result.text)
    return 0


def _cmd_encode(args: argparse.Namespace, config: dict, options: ObfuscationOptions) -> int:
    if args.legacy:
        print(encode_legacy(args.text, options))
    else:
        timestamp = args.time if args.time is not None else _now_millis()
        print(encode(args.text, timestamp, options))
    return 0


def _cmd_table(args: argparse.Namespace, config: dict, options: ObfuscationOptions) -> int:
    timestamp = args.time if args.time is not None else _now_millis()
    rotated = rotate_table(timestamp, options.obfuscation_table, options.rotation_period_seconds)

    print(f"bucket: {rotation_bucket(timestamp, options.rotation_period_seconds)}")
    print(f"table: {rotated}")

    if args.mapping:
        mapping = build_mapping(rotated)
        table = Table(title="Substitution mapping")
        table.add_column("Index", justify="right")
        table.add_column("Standard")
        table.add_column("Obfuscated")
        for i, standard_char in enumerate(STANDARD_ALPHABET):
            table.add_row(str(i), standard_char, mapping.forward[standard_char])
        Console().print(table)

    return 0


def _cmd_issue(args: argparse.Namespace, config: dict, options: ObfuscationOptions) -> int:
    timestamp = args.time if args.time is not None else _now_millis()
    expires_in = get_config_value(
        config, 'verification.expires_in_seconds', DEFAULT_EXPIRES_IN_SECONDS
    )
    cooldown = _get_cooldown(config)

    payload = AuthPayload(
        uuid=str(uuid.uuid4()),
        action=args.action,
        player_uuid=args.player_uuid,
        expires_time=timestamp + expires_in * 1000,
    )
    issued = issue_link(
        payload.to_json(),
        timestamp,
        options,
        salt=get_config_value(config, 'verification.salt', DEFAULT_SALT),
        endpoint=get_config_value(config, 'verification.endpoint', DEFAULT_ENDPOINT),
        token_length=get_config_value(config, 'verification.token_length', DEFAULT_TOKEN_LENGTH),
        cooldown=cooldown,
        player_uuid=args.player_uuid,
        action=args.action,
    )
    logger.info(f"Issued link for record {payload.uuid}")

    print(f"uuid: {payload.uuid}")
    print(f"token: {issued.token}")
    print(f"data: {issued.data}")
    print(f"hash: {issued.link_hash}")
    print(f"link: {issued.link}")
    return 0


def _cmd_verify(args: argparse.Namespace, config: dict, options: ObfuscationOptions) -> int:
    verifier = LinkVerifier.from_config(config)

    def lookup(record_uuid: str) -> AuthRecord:
        return AuthRecord(uuid=record_uuid, token=args.token, is_used=args.used)

    result = verifier.verify(args.data, args.hash, lookup)
    if not result.valid:
        print(f"invalid: {result.error}")
        return 1

    print(f"valid: {result.payload.action} for {result.payload.player_uuid}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
