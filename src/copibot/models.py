"""Defines the data models exchanged between the chat flow and its storage."""

from typing import Any

import regex
from pydantic import BaseModel, ConfigDict, Field, field_validator

_LEADING_NUMBER = regex.compile(r"\s*[-+]?\d+(\.\d+)?")


def _loose_float(value: Any) -> float:  # noqa: ANN401
    """Read a price the way catalogue rows store it: a number, a numeric string, or junk (0)."""
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value)) if value is not None else None
    return float(match.group()) if match else 0.0


class IncomingMessage(BaseModel):
    """A single WhatsApp message as delivered by the webhook."""

    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(alias="from")
    id: str
    type: str = "text"
    text: str = ""


class Product(BaseModel):
    """A catalogue row returned by the product search."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sku: str | None = None
    name: str = Field(alias="nombre")
    price: float = Field(default=0.0, alias="precio")
    stock: int | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> float:  # noqa: ANN401
        return _loose_float(value)


class CartItem(Product):
    """A product in the cart with the requested quantity."""

    qty: int = 1


class Order(BaseModel):
    """A sales order ready to be stored, with or without invoice."""

    model_config = ConfigDict(populate_by_name=True)

    customer_phone: str = Field(alias="cliente_tel")
    invoice: bool = Field(alias="factura")
    total: float
    items: list[CartItem] = Field(default_factory=list)


class ServiceRequest(BaseModel):
    """A technical service order opened from a support message."""

    model_config = ConfigDict(populate_by_name=True)

    customer_phone: str = Field(alias="telefono")
    customer_id: int | str | None = Field(default=None, alias="cliente_id")
    equipment: str = Field(default="No especificado", alias="equipo")
    issue: str = Field(default="Sin descripción", alias="falla")


def extract_message(body: dict[str, Any]) -> IncomingMessage | None:
    """
    Pull the first message out of a WhatsApp webhook payload.

    Returns:
        The message, or None for status updates and other events without one.

    """
    try:
        msg = body["entry"][0]["changes"][0]["value"]["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None

    msg_type = msg.get("type", "text")
    text = msg.get("text", {}).get("body", "").strip() if msg_type == "text" else ""
    return IncomingMessage(sender=msg["from"], id=msg["id"], type=msg_type, text=text)
