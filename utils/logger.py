"""
Logging helpers shared by services and routers.
"""

import logging
from typing import Any, Dict, Optional


SENSITIVE_FIELDS = {
    'password', 'token', 'secret', 'authorization', 'hash'
}


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def mask_token(token: str) -> str:
    """Keep the first 8 characters of a token so log lines can be correlated."""
    if len(token) > 8:
        return f"{token[:8]}..."
    return "***REDACTED***"


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove credentials from a dict before it is passed as `extra=`.

    Passwords, secrets and digests are redacted completely. Tokens keep an
    8-character prefix. Nested dicts are sanitized recursively.

    Args:
        data: Dictionary that may contain sensitive fields

    Returns:
        A sanitized copy; the input is left untouched
    """
    sanitized = data.copy()

    for key, value in sanitized.items():
        lowered = key.lower()
        if isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        elif isinstance(value, str) and any(s in lowered for s in SENSITIVE_FIELDS):
            if 'token' in lowered and 'hash' not in lowered:
                sanitized[key] = mask_token(value)
            else:
                sanitized[key] = "***REDACTED***"

    return sanitized


def log_request(
    logger: logging.Logger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    extra: Optional[Dict[str, Any]] = None
):
    """
    Log one HTTP request in a structured format.

    `extra` (client address, query parameters, ...) is sanitized first, so a
    `?token=` or `?password=` in a URL never reaches the log files. The level
    follows the status code: 5xx error, 4xx warning, everything else info.

    Usage:
        log_request(logger, "POST", "/api/login", 200, 45.2, extra={"client_ip": ip})
    """
    log_data = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }

    if extra:
        log_data.update(sanitize_log_data(extra))

    message = f'{log_data.get("client_ip", "-")} - "{method} {path} HTTP/1.1" {status_code}'
    if status_code >= 500:
        logger.error(message, extra=log_data)
    elif status_code >= 400:
        logger.warning(message, extra=log_data)
    else:
        logger.info(message, extra=log_data)
