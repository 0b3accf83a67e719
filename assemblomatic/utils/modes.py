"""
Conversion helpers for Unix permission strings.

Descriptors spell modes the way ``chmod`` does (``"0755"``, ``"644"``). The
archive writers work with plain integers, and ``-1`` is the shared sentinel
for "no mode configured – let the writer apply its own default".
"""

from __future__ import annotations

import logging
import re

__all__ = ["UNSET_MODE", "mode_to_int", "mode_to_string"]

log = logging.getLogger(__name__)

#: Sentinel returned for missing or unusable mode strings.
UNSET_MODE: int = -1

_OCTAL_RE = re.compile(r"^0?[0-7]{1,4}$")


def mode_to_int(mode: str | None, logger: logging.Logger | None = None) -> int:
    """Parse an octal permission string into its numeric value.

    Args:
        mode: Octal string such as ``"777"`` or ``"0644"``. ``None`` and blank
            strings mean "unset".
        logger: Logger receiving the warning for malformed input. Falls back
            to the module logger.

    Returns:
        The numeric mode (``"777"`` → ``511``) or :data:`UNSET_MODE` when
        *mode* is unset or cannot be parsed.
    """
    if mode is None:
        return UNSET_MODE

    text = str(mode).strip()
    if not text:
        return UNSET_MODE

    if not _OCTAL_RE.match(text):
        (logger or log).warning(
            "Ignoring invalid mode %r – expected an octal string like '0755'", mode
        )
        return UNSET_MODE

    return int(text, 8)


def mode_to_string(mode: int) -> str:
    """Return *mode* in ``0755`` notation (``"unset"`` for the sentinel)."""
    if mode < 0:
        return "unset"
    return f"{mode:04o}"
