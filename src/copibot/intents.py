"""
Conversation intents detected from incoming chat messages.

The bot keeps a per-customer stage and only considers the intents that make
sense for it: a quantity is only expected right after a product card, the
"finish" wording only while a cart is open, and the invoice choice only after
the bot has asked for it. Support requests are recognised at any stage.

Dispatch order used by `IntentMatcher.classify`:
    SUPPORT → QUANTITY (ask_qty) → FINISH_ORDER (cart_open)
    → WITH_INVOICE / WITHOUT_INVOICE (await_invoice) → CONFIRM → UNKNOWN
"""

from __future__ import annotations

import logging
from enum import Enum

import regex

from .config import PatternSet
from .patterns import NUMBER_WORDS, compile_pattern, matches

logger = logging.getLogger(__name__)

# Longer digit runs are not quantities and would overflow int() parsing limits.
_DIGITS = regex.compile(r"(?<!\d)\d{1,9}(?!\d)")


class Stage(str, Enum):
    """The conversation stage a customer session is in."""

    IDLE = "idle"
    ASK_QTY = "ask_qty"
    CART_OPEN = "cart_open"
    AWAIT_INVOICE = "await_invoice"
    SV_COLLECT = "sv_collect"


class Intent(str, Enum):
    """What a message is asking the bot to do."""

    SUPPORT = "support"
    QUANTITY = "quantity"
    FINISH_ORDER = "finish_order"
    WITH_INVOICE = "with_invoice"
    WITHOUT_INVOICE = "without_invoice"
    CONFIRM = "confirm"
    UNKNOWN = "unknown"


class IntentMatcher:
    """Regex-based intent detection over a compiled PatternSet."""

    def __init__(self, pattern_set: PatternSet | None = None) -> None:
        """
        Compile every pattern of the set once.

        Args:
            pattern_set: The patterns to use. Defaults to the built-in set.

        """
        self.pattern_set = pattern_set or PatternSet()
        self.yes_confirm = compile_pattern(self.pattern_set.yes_confirm)
        self.with_invoice = compile_pattern(self.pattern_set.with_invoice)
        self.without_invoice = compile_pattern(self.pattern_set.without_invoice)
        self.invoice_phrase = compile_pattern(self.pattern_set.invoice_phrase)
        self.no_invoice_phrase = compile_pattern(self.pattern_set.no_invoice_phrase)
        self.finish_order = compile_pattern(self.pattern_set.finish_order)
        self.quantity = compile_pattern(self.pattern_set.quantity)

    def is_confirmation(self, text: str | None) -> bool:
        """Check if the text is an affirmative answer ("sí", "dale", "agrégalo")."""
        return matches(self.yes_confirm, text)

    def wants_invoice(self, text: str | None) -> bool:
        """Check if the text mentions an invoice ("con", "con factura", "factura")."""
        return matches(self.with_invoice, text)

    def declines_invoice(self, text: str | None) -> bool:
        """Check if the text turns the invoice down ("sin", "sin factura", "no")."""
        return matches(self.without_invoice, text)

    def is_finish_request(self, text: str | None) -> bool:
        """Check if the customer wants to close the cart."""
        return matches(self.finish_order, text)

    def looks_like_quantity(self, text: str | None) -> bool:
        """Check if the text contains a number, in digits or spelled out."""
        return matches(self.quantity, text)

    def is_support_request(self, text: str | None) -> bool:
        """Check if the text mentions any technical support keyword."""
        if not text:
            return False
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.pattern_set.support_keywords)

    def invoice_choice(self, text: str | None) -> bool | None:
        """
        Decide whether the customer asked for an invoice.

        Explicit phrases win over bare words: "sin factura" (or "no quiero
        factura") declines, any other "factura" accepts, so "no sé, mejor con
        factura" asks for one. Only then are bare "sin"/"no" and "con" used.

        Returns:
            False for "without invoice", True for "with invoice", None if the
            text answers neither.

        """
        if matches(self.no_invoice_phrase, text):
            return False
        if matches(self.invoice_phrase, text):
            return True
        if self.declines_invoice(text):
            return False
        if self.wants_invoice(text):
            return True
        return None

    def classify(self, text: str | None, stage: Stage = Stage.IDLE) -> Intent:
        """
        Classify a message given the session's current stage.

        Args:
            text: The message body.
            stage: The stage the customer's session is in.

        Returns:
            The detected intent, or Intent.UNKNOWN.

        """
        intent = self._classify(text, Stage(stage))
        logger.debug("Classified %r at stage '%s' as '%s'", text, Stage(stage).value, intent.value)
        return intent

    def _classify(self, text: str | None, stage: Stage) -> Intent:
        if self.is_support_request(text):
            return Intent.SUPPORT
        if stage == Stage.ASK_QTY and self.looks_like_quantity(text):
            return Intent.QUANTITY
        if stage == Stage.CART_OPEN and self.is_finish_request(text):
            return Intent.FINISH_ORDER
        if stage == Stage.AWAIT_INVOICE:
            choice = self.invoice_choice(text)
            if choice is not None:
                return Intent.WITH_INVOICE if choice else Intent.WITHOUT_INVOICE
        if self.is_confirmation(text):
            return Intent.CONFIRM
        return Intent.UNKNOWN


def parse_quantity(text: str | None) -> int:
    """
    Extract an item quantity from a message.

    The first positive integer of at most nine digits wins, then the first
    spelled-out number from "uno" to "diez". Anything else counts as a single
    item.
    """
    if not text:
        return 1
    digits = _DIGITS.search(text)
    if digits and int(digits.group()) > 0:
        return int(digits.group())
    for word in regex.findall(r"\w+", text.lower()):
        if word in NUMBER_WORDS:
            return NUMBER_WORDS[word]
    return 1
