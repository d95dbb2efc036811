"""Argument validation for cluster workflows.

Pure checks. Every ``require_*`` function raises ``ValidationError`` on bad
input and returns the value unchanged otherwise.
"""

from __future__ import annotations

import re
from typing import Any

from .errors import ValidationError

MIN_PASSWORD_LENGTH = 4
MIN_PORT = 1024
MAX_PORT = 65535

_IPV4_OCTET = r"(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])"
_IPV4_RE = re.compile(rf"{_IPV4_OCTET}(\.{_IPV4_OCTET}){{3}}")
_LABEL_RE = re.compile(r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)")
_TLD_RE = re.compile(r"[A-Za-z]{2,63}")


def require_in_range(value: Any, lo: int, hi: int, name: str) -> int:
    """Require an integer within [lo, hi]."""
    if value is None:
        raise ValidationError(f"The {name} cannot be null.")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"The {name} given is not an integer.")
    if value < lo or value > hi:
        raise ValidationError(f"The {name} needs to be between {lo} and {hi}.")
    return value


def require_string(value: Any, name: str) -> str:
    """Require a string, which may be empty."""
    if not isinstance(value, str):
        raise ValidationError(f"The {name} given is not a string.")
    return value


def require_non_empty_string(value: Any, name: str) -> str:
    """Require a non-empty string."""
    if value is None:
        raise ValidationError(f"The {name} cannot be null or empty.")
    require_string(value, name)
    if value == "":
        raise ValidationError(f"The {name} cannot be null or empty.")
    return value


def require_password(value: Any, name: str, min_length: int = MIN_PASSWORD_LENGTH) -> str:
    """Require a password string of at least ``min_length`` characters."""
    require_non_empty_string(value, name)
    if len(value) < min_length:
        raise ValidationError(f"The {name} minimum length has to be {min_length}.")
    return value


def require_port(value: Any, name: str) -> int:
    """Require a TCP port usable by a non-sandbox instance."""
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"The {name} given is not an integer.")
    if value < MIN_PORT or value > MAX_PORT:
        raise ValidationError(
            f"Invalid {name} value. Please use a valid TCP port number "
            f">= {MIN_PORT} and <= {MAX_PORT}."
        )
    return value


def require_host(value: Any, name: str) -> str:
    """Require an IPv4 address or a domain name."""
    require_non_empty_string(value, name)
    if not is_valid_ipv4(value) and not is_valid_hostname(value):
        raise ValidationError(f"The {name} given is not a valid IP address nor domain name.")
    return value


def is_valid_ipv4(address: str) -> bool:
    """Check dotted-quad IPv4 syntax."""
    return bool(_IPV4_RE.fullmatch(address))


def is_valid_hostname(hostname: str) -> bool:
    """Check domain name syntax. No DNS lookup is performed."""
    if not hostname or len(hostname) > 253:
        return False
    labels = hostname.rstrip(".").split(".")
    if len(labels) < 2:
        return False
    if not all(_LABEL_RE.fullmatch(label) for label in labels):
        return False
    return bool(_TLD_RE.fullmatch(labels[-1]))
