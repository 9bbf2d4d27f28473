"""
Logging setup.

One console handler on the root logger, level taken from LOG_LEVEL, and a
filter that keeps API keys out of the output.
"""

import logging
import re

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SECRET_PATTERNS = [
    (re.compile(r"([?&]key=)[^&\s]+"), r"\1********"),
    (re.compile(r"(Bearer\s+)\S+", re.IGNORECASE), r"\1********"),
    (re.compile(r"(x-goog-api-key[\"']?\s*[:=]\s*[\"']?)[^\"'\s,}]+", re.IGNORECASE), r"\1********"),
]


def mask_secrets(text: str) -> str:
    """
    Mask API keys in a string.

    Examples:
        >>> mask_secrets("https://host/v1?key=abc123")
        'https://host/v1?key=********'
        >>> mask_secrets("Authorization: Bearer sk-xyz")
        'Authorization: Bearer ********'
    """
    for pattern, repl in _SECRET_PATTERNS:
        text = pattern.sub(repl, text)
    return text


class SecretMaskingFilter(logging.Filter):
    """Mask API keys in the rendered message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the root logger once.

    Calling it again only updates the level, so the Flask reloader and the
    test suite do not stack duplicate handlers.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(getattr(h, "_nihongo_sensei", False) for h in root.handlers):
        return root

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(SecretMaskingFilter())
    handler._nihongo_sensei = True
    root.addHandler(handler)

    return root
