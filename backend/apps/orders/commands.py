from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass
class CheckoutCommand:
    """
    Checkout request as the engine sees it.

    ``cart_item_ids`` is None when the caller selected nothing (whole cart) and
    a tuple of distinct ids otherwise; an explicit empty list stays empty so it
    can be rejected rather than read as "everything".
    """

    cart_item_ids: Optional[Tuple[int, ...]] = None
    buyer_note: Optional[str] = None

    @staticmethod
    def normalize_ids(raw_ids) -> Optional[Tuple[int, ...]]:
        if raw_ids is None:
            return None
        if isinstance(raw_ids, (str, bytes)) or not hasattr(raw_ids, "__iter__"):
            raise ValueError("cartItemIds must be a list")
        seen = []
        for raw in raw_ids:
            if isinstance(raw, bool):
                raise ValueError("cartItemIds must contain integers")
            try:
                value = int(raw)
            except (ValueError, TypeError):
                raise ValueError("cartItemIds must contain integers") from None
            if value not in seen:
                seen.append(value)
        return tuple(seen)

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "CheckoutCommand":
        if not isinstance(payload, dict):
            raise ValueError("Payload must be a dict")
        raw_ids = payload.get("cartItemIds", payload.get("cart_item_ids"))
        note = payload.get("buyerNote", payload.get("buyer_note"))
        if isinstance(note, str):
            note = note.strip() or None
        return CheckoutCommand(
            cart_item_ids=CheckoutCommand.normalize_ids(raw_ids),
            buyer_note=note,
        )


@dataclass
class OrderMessageCommand:
    message: str

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "OrderMessageCommand":
        if not isinstance(payload, dict):
            raise ValueError("Payload must be a dict")
        message = payload.get("message")
        return OrderMessageCommand(message=message.strip() if isinstance(message, str) else "")


@dataclass
class OrderActionCommand:
    action: str

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "OrderActionCommand":
        if not isinstance(payload, dict):
            raise ValueError("Payload must be a dict")
        action = payload.get("action")
        return OrderActionCommand(action=action.strip().lower() if isinstance(action, str) else "")
