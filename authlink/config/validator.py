"""Configuration validation."""

import logging
from typing import Dict, Any, List

from authlink.codec.options import (
    DEFAULT_OBFUSCATION_TABLE,
    DEFAULT_ROTATION_PERIOD_SECONDS,
    DEFAULT_SHIFT,
    PADDING_SENTINEL,
    STANDARD_ALPHABET,
    ObfuscationOptions,
)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Every section is optional; missing values fall back to defaults.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    section_validators = [
        ('obfuscation', _validate_obfuscation),
        ('verification', _validate_verification),
        ('logging', _validate_logging),
    ]
    for name, validate_section in section_validators:
        section = config.get(name)
        if section is None:
            section = {}
        elif not isinstance(section, dict):
            errors.append(f"{name} must be a mapping")
            continue
        errors.extend(validate_section(section))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_obfuscation(section: Dict[str, Any]) -> List[str]:
    """Validate obfuscation section."""
    errors = []

    if 'shift' in section and not _is_int(section['shift']):
        errors.append("obfuscation.shift must be an integer")

    if 'table' in section:
        table = section['table']
        if not isinstance(table, str) or not table:
            errors.append("obfuscation.table must be a non-empty string")
        elif len(table) > len(STANDARD_ALPHABET):
            errors.append(
                f"obfuscation.table must be at most {len(STANDARD_ALPHABET)} characters"
            )
        else:
            duplicates = sorted({c for c in table if table.count(c) > 1})
            if duplicates:
                # Lossy inverse mapping; existing encoders may rely on it
                logger.warning(
                    f"obfuscation.table repeats symbols {''.join(duplicates)!r}, "
                    f"some payloads will not decode exactly"
                )
            if PADDING_SENTINEL in table:
                logger.warning(
                    f"obfuscation.table contains the padding sentinel "
                    f"{PADDING_SENTINEL!r}, some payloads will not decode exactly"
                )

    if 'rotation_period_seconds' in section:
        period = section['rotation_period_seconds']
        if not _is_int(period) or period < 1:
            errors.append("obfuscation.rotation_period_seconds must be a positive integer")

    if 'decode_base64' in section and not isinstance(section['decode_base64'], bool):
        errors.append("obfuscation.decode_base64 must be a boolean")

    return errors


def _validate_verification(section: Dict[str, Any]) -> List[str]:
    """Validate verification section."""
    errors = []

    if 'salt' in section and not isinstance(section['salt'], str):
        errors.append("verification.salt must be a string")

    if 'token_length' in section:
        length = section['token_length']
        if not _is_int(length) or length < 1:
            errors.append("verification.token_length must be a positive integer")

    if 'expires_in_seconds' in section:
        expires_in = section['expires_in_seconds']
        if not _is_int(expires_in) or expires_in < 1:
            errors.append("verification.expires_in_seconds must be a positive integer")

    if 'cooldown_seconds' in section:
        cooldown = section['cooldown_seconds']
        if not _is_int(cooldown) or cooldown < 0:
            errors.append("verification.cooldown_seconds must be a non-negative integer")

    if 'endpoint' in section and not isinstance(section['endpoint'], str):
        errors.append("verification.endpoint must be a string")

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    level = section.get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if 'console' in section and not isinstance(section['console'], bool):
        errors.append("logging.console must be a boolean")

    log_file = section.get('file')
    if log_file is not None and not isinstance(log_file, str):
        errors.append("logging.file must be a string path or null")

    return errors


def options_from_config(config: Dict[str, Any]) -> ObfuscationOptions:
    """
    Build codec options from the obfuscation section, applying defaults.

    Args:
        config: Validated configuration dictionary

    Returns:
        ObfuscationOptions
    """
    section = config.get('obfuscation') or {}

    return ObfuscationOptions(
        shift=section.get('shift', DEFAULT_SHIFT),
        obfuscation_table=section.get('table', DEFAULT_OBFUSCATION_TABLE),
        rotation_period_seconds=section.get(
            'rotation_period_seconds', DEFAULT_ROTATION_PERIOD_SECONDS
        ),
        decode_base64=section.get('decode_base64', False),
    )
