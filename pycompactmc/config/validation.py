"""
Configuration validation utilities
"""

import logging
import re

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_]{1,16}$')


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""
    pass


def validate_host(host: str) -> str:
    """Validate host address"""
    if not host or not isinstance(host, str):
        raise ConfigValidationError("Host must be a non-empty string")

    if len(host.strip()) == 0:
        raise ConfigValidationError("Host cannot be empty or whitespace")

    return host.strip()


def validate_port(port: int) -> int:
    """Validate port number"""
    if not isinstance(port, int) or isinstance(port, bool):
        raise ConfigValidationError("Port must be an integer")

    if port < 1 or port > 65535:
        raise ConfigValidationError("Port must be between 1 and 65535")

    return port


def validate_username(username: str) -> str:
    """Validate an offline-mode username"""
    if not isinstance(username, str):
        raise ConfigValidationError("Username must be a string")

    if not USERNAME_PATTERN.match(username):
        raise ConfigValidationError("Username must be 1-16 letters, digits or underscores")

    return username


def validate_timeout(timeout: float) -> float:
    """Validate timeout value"""
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool):
        raise ConfigValidationError("Timeout must be a number")

    if timeout <= 0:
        raise ConfigValidationError("Timeout must be greater than 0")

    return float(timeout)


def validate_log_level(level) -> str:
    """Validate a logging level name or number"""
    if isinstance(level, int) and not isinstance(level, bool):
        name = logging.getLevelName(level)
        if not isinstance(name, str) or name.startswith("Level "):
            raise ConfigValidationError(f"Unknown log level: {level}")
        return name

    if not isinstance(level, str):
        raise ConfigValidationError("Log level must be a string or integer")

    name = level.strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigValidationError(f"Unknown log level: {level}")

    return name
