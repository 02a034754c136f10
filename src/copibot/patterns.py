"""Default intent patterns and the helpers used to compile and test them."""
# src/copibot/patterns.py

from __future__ import annotations

import logging
from typing import Final

import regex

logger = logging.getLogger(__name__)

# Case-insensitive; `regex` treats accented letters as word characters, so `\b`
# works around "sí", "agrégalo" and "añade" as well as plain ASCII words.
PATTERN_FLAGS: Final[int] = regex.IGNORECASE

YES_CONFIRM: Final[str] = r"\b(s[ií]|sí|si|claro|va|dale|correcto|ok|afirmativo|hazlo|agr[eé]ga(lo)?|añade|m[eé]te|pon(lo)?)\b"
WITH_INVOICE: Final[str] = r"\b(con|con factura|factura)\b"
WITHOUT_INVOICE: Final[str] = r"\b(sin|sin factura|no)\b"
# Explicit answers decide the invoice choice before the bare "con", "sin" and "no".
INVOICE_PHRASE: Final[str] = r"\bfactura\b"
NO_INVOICE_PHRASE: Final[str] = r"\b(sin|no(\s+(quiero|necesito|requiero|ocupo))?)\s+factura\b"
FINISH_ORDER: Final[str] = r"finaliz|listo|eso|nada más"
QUANTITY: Final[str] = r"\b(\d+|uno|dos|tres|cuatro|cinco|seis|siete|ocho|nueve|diez)\b"

SUPPORT_KEYWORDS: Final[tuple[str, ...]] = (
    "falla",
    "no imprime",
    "atasco",
    "error",
    "servicio",
    "soporte",
    "revisión",
    "no enciende",
)

NUMBER_WORDS: Final[dict[str, int]] = {
    "uno": 1,
    "dos": 2,
    "tres": 3,
    "cuatro": 4,
    "cinco": 5,
    "seis": 6,
    "siete": 7,
    "ocho": 8,
    "nueve": 9,
    "diez": 10,
}

_PATTERN_LOG_MAX_LENGTH = 40


def compile_pattern(source: str) -> regex.Pattern:
    """
    Compile an intent pattern with the shared flags.

    Args:
        source: The regular expression source.

    Returns:
        The compiled pattern.

    Raises:
        ValueError: If the source is empty or is not a valid regular expression.

    """
    if not source:
        msg = "Invalid regex pattern: the pattern must not be empty."
        raise ValueError(msg)
    try:
        compiled = regex.compile(source, PATTERN_FLAGS)
    except regex.error as e:
        msg = f"Invalid regex pattern '{source}': {e}"
        raise ValueError(msg) from e
    logger.debug("Compiled pattern: '%s'", source[:_PATTERN_LOG_MAX_LENGTH])
    return compiled


def matches(pattern: regex.Pattern, text: str | None) -> bool:
    """Return True if `pattern` is found anywhere within `text`."""
    if not text:
        return False
    return pattern.search(text) is not None
