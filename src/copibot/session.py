"""
Per-customer conversation state and the sales and support flow that advances it.

A session moves through these stages:
    IDLE/ASK_QTY --quantity or "sí"--> CART_OPEN --"listo"--> AWAIT_INVOICE
    --any answer--> IDLE (order placed, cart cleared)
    any stage --support keyword--> SV_COLLECT (service order opened)

Product search, storage and message delivery are left to the caller; `handle`
only decides what happens and returns it as a `Turn`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .intents import Intent, IntentMatcher, Stage, parse_quantity
from .models import CartItem, IncomingMessage, Order, Product, ServiceRequest

logger = logging.getLogger(__name__)

AUDIO_REPLY: Final[str] = "Lo siento, aún no puedo escuchar audios, pero te comuniqué con soporte y en un momento se ponen en contacto contigo 🙂"
ASK_REPEAT_REPLY: Final[str] = "No alcancé a ver el artículo anterior. ¿Podrías repetirlo?"
ASK_INVOICE_REPLY: Final[str] = "Perfecto ✋ ¿La cotizamos con factura o sin factura?"
ORDER_PLACED_REPLY: Final[str] = "✅ ¡Listo! Generé tu solicitud. Un asesor confirmará entrega y forma de pago."
GREETING_REPLY: Final[str] = "¡Hola! Soy CopiBot Lite de CP Digital. Puedo ayudarte con consumibles o agendar soporte técnico. 🙂"


class Action(str, Enum):
    """What the caller has to do after a message was handled."""

    DUPLICATE = "duplicate"
    FORWARD_AUDIO = "forward_audio"
    OPEN_SERVICE_ORDER = "open_service_order"
    SEND_PRODUCT_CARD = "send_product_card"
    ASK_REPEAT = "ask_repeat"
    CART_UPDATED = "cart_updated"
    ASK_INVOICE = "ask_invoice"
    PLACE_ORDER = "place_order"
    GREET = "greet"


@dataclass
class Turn:
    """The outcome of handling one message."""

    action: Action
    reply: str | None = None
    order: Order | None = None
    service_request: ServiceRequest | None = None
    forward: IncomingMessage | None = None


def format_price(price: float) -> str:
    """Render a price without a trailing '.0' for whole amounts."""
    return str(int(price)) if price.is_integer() else str(price)


def format_product_card(product: Product) -> str:
    return f"1️⃣ {product.name}\nSKU: {product.sku}\n${format_price(product.price)} + IVA\n{product.stock} pzas\n¿Te funciona?"


def format_cart_status(cart: list[CartItem]) -> str:
    """List the cart contents and ask whether to keep adding or finish."""
    items = [f"• {item.name} x{item.qty} — ${format_price(item.price)} + IVA" for item in cart]
    return "Añadí 🛒\n" + "\n".join(items) + "\n¿Deseas agregar algo más o finalizamos?"


def format_service_confirmation(order_id: int | str) -> str:
    return f"✅ Generé tu orden de servicio #{order_id}. Un técnico se pondrá en contacto contigo para agendar la visita."


class Session(BaseModel):
    """The stored state of one customer's conversation."""

    model_config = ConfigDict(populate_by_name=True)

    phone: str = Field(alias="from")
    stage: Stage = Stage.IDLE
    last_mid: str | None = None
    candidate: Product | None = None
    cart: list[CartItem] = Field(default_factory=list)
    support_issue: str | None = None
    equipment: str | None = None

    def move_to(self, stage: Stage) -> None:
        """Change stage, logging the transition."""
        if stage != self.stage:
            logger.info("Session %s: %s -> %s", self.phone, self.stage.value, stage.value)
        self.stage = stage

    def add_to_cart(self, qty: int) -> bool:
        """Add the offered product to the cart. Returns False if nothing was offered."""
        if self.candidate is None:
            return False
        self.cart.append(CartItem(**self.candidate.model_dump(), qty=qty))
        return True

    def cart_total(self) -> float:
        """Sum of price times quantity over the cart, before tax."""
        return sum(item.price * (item.qty or 1) for item in self.cart)

    def offer_product(self, product: Product) -> Turn:
        """Remember a product found by the caller's search and ask for a quantity."""
        self.candidate = product
        self.move_to(Stage.ASK_QTY)
        return Turn(Action.SEND_PRODUCT_CARD, format_product_card(product))

    def handle(self, message: IncomingMessage, matcher: IntentMatcher | None = None) -> Turn:
        """
        Apply one incoming message to the session.

        Args:
            message: The message to handle.
            matcher: Intent patterns to use. Defaults to the built-in set.

        Returns:
            The action for the caller, with the reply text and any order or
            service request to store.

        """
        if self.last_mid is not None and self.last_mid == message.id:
            logger.debug("Session %s: duplicate message %s ignored", self.phone, message.id)
            return Turn(Action.DUPLICATE)
        self.last_mid = message.id

        if message.type == "audio":
            return Turn(Action.FORWARD_AUDIO, AUDIO_REPLY, forward=message)

        matcher = matcher or IntentMatcher()
        text = message.text.strip()
        intent = matcher.classify(text, self.stage)

        if intent == Intent.SUPPORT:
            return self._open_service_request(text)
        if intent == Intent.QUANTITY or (intent == Intent.CONFIRM and self.stage == Stage.ASK_QTY):
            return self._take_quantity(parse_quantity(text))
        if intent == Intent.FINISH_ORDER:
            self.move_to(Stage.AWAIT_INVOICE)
            return Turn(Action.ASK_INVOICE, ASK_INVOICE_REPLY)
        if self.stage == Stage.AWAIT_INVOICE:
            # Any answer closes the order; only an explicit invoice request sets it.
            return self._place_order(invoice=matcher.invoice_choice(text) is True)
        return Turn(Action.GREET, GREETING_REPLY)

    def _open_service_request(self, text: str) -> Turn:
        self.support_issue = text
        self.move_to(Stage.SV_COLLECT)
        request = ServiceRequest(
            customer_phone=self.phone,
            equipment=self.equipment or "No especificado",
            issue=text or "Sin descripción",
        )
        return Turn(Action.OPEN_SERVICE_ORDER, service_request=request)

    def _take_quantity(self, qty: int) -> Turn:
        if not self.add_to_cart(qty):
            return Turn(Action.ASK_REPEAT, ASK_REPEAT_REPLY)
        self.move_to(Stage.CART_OPEN)
        return Turn(Action.CART_UPDATED, format_cart_status(self.cart))

    def _place_order(self, *, invoice: bool) -> Turn:
        order = Order(customer_phone=self.phone, invoice=invoice, total=self.cart_total(), items=list(self.cart))
        logger.info("Session %s: order of %d item(s), total %s, invoice=%s", self.phone, len(order.items), order.total, invoice)
        self.cart = []
        self.move_to(Stage.IDLE)
        return Turn(Action.PLACE_ORDER, ORDER_PLACED_REPLY, order=order)
