from dataclasses import dataclass
from typing import Any, Dict, Optional


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value) if value is not None else None
    except (ValueError, TypeError):
        return None


@dataclass
class AddCartItemCommand:
    product_id: Optional[int]
    quantity: int = 1

    @staticmethod
    def from_raw(raw: Dict[str, Any]) -> "AddCartItemCommand":
        if not isinstance(raw, dict):
            raise ValueError("Payload must be a dict")
        pid = raw.get("productId", raw.get("product_id"))
        qty = raw.get("quantity")
        # Missing quantity means one unit; an unparsable one is left for the service to reject
        quantity = 1 if qty is None else _to_int(qty)
        return AddCartItemCommand(
            product_id=_to_int(pid), quantity=0 if quantity is None else quantity
        )


@dataclass
class UpdateCartItemCommand:
    item_id: int
    quantity: int

    @staticmethod
    def from_raw(item_id: int, raw: Dict[str, Any]) -> "UpdateCartItemCommand":
        if not isinstance(raw, dict):
            raise ValueError("Payload must be a dict")
        quantity = _to_int(raw.get("quantity"))
        if quantity is None:
            raise ValueError("quantity must be an integer")
        return UpdateCartItemCommand(item_id=int(item_id), quantity=quantity)
