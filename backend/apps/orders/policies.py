"""Who may do what to an order, keyed by viewer relationship and order status."""
from typing import Dict, List, Optional, Tuple

from .models import OrderStatus

BUYER = "buyer"
SELLER = "seller"
BUYER_AND_SELLER = "buyer_and_seller"

VIEWER_CONTEXTS: Tuple[str, ...] = (BUYER, SELLER, BUYER_AND_SELLER)

ACTION_MESSAGE = "message"
ACTION_CONFIRM = "confirm"
ACTION_SHIP = "ship"
ACTION_COMPLETE = "complete"
ACTION_CANCEL = "cancel"

# action -> status the order moves to
TRANSITIONS: Dict[str, str] = {
    ACTION_CONFIRM: OrderStatus.CONFIRMED,
    ACTION_SHIP: OrderStatus.SHIPPED,
    ACTION_COMPLETE: OrderStatus.COMPLETED,
    ACTION_CANCEL: OrderStatus.CANCELLED,
}

_BUYER_ACTIONS: Dict[str, Tuple[str, ...]] = {
    OrderStatus.PENDING: (ACTION_CANCEL, ACTION_MESSAGE),
    OrderStatus.CONFIRMED: (ACTION_MESSAGE,),
    OrderStatus.SHIPPED: (ACTION_COMPLETE, ACTION_MESSAGE),
    OrderStatus.COMPLETED: (),
    OrderStatus.CANCELLED: (),
}

_SELLER_ACTIONS: Dict[str, Tuple[str, ...]] = {
    OrderStatus.PENDING: (ACTION_CONFIRM, ACTION_CANCEL, ACTION_MESSAGE),
    OrderStatus.CONFIRMED: (ACTION_SHIP, ACTION_CANCEL, ACTION_MESSAGE),
    OrderStatus.SHIPPED: (ACTION_MESSAGE,),
    OrderStatus.COMPLETED: (),
    OrderStatus.CANCELLED: (),
}


def _union(first: Tuple[str, ...], second: Tuple[str, ...]) -> Tuple[str, ...]:
    return first + tuple(a for a in second if a not in first)


ACTION_POLICY: Dict[Tuple[str, str], Tuple[str, ...]] = {}
for _status in OrderStatus.values:
    ACTION_POLICY[(BUYER, _status)] = _BUYER_ACTIONS[_status]
    ACTION_POLICY[(SELLER, _status)] = _SELLER_ACTIONS[_status]
    ACTION_POLICY[(BUYER_AND_SELLER, _status)] = _union(
        _BUYER_ACTIONS[_status], _SELLER_ACTIONS[_status]
    )


def resolve_viewer_context(user_id: int, buyer_id: int, seller_ids) -> Optional[str]:
    """Return the viewer's relation to an order, or None when there is none."""
    is_buyer = buyer_id == user_id
    is_seller = user_id in set(seller_ids)
    if is_buyer and is_seller:
        return BUYER_AND_SELLER
    if is_buyer:
        return BUYER
    if is_seller:
        return SELLER
    return None


def allowed_actions(viewer_context: str, status: str) -> List[str]:
    return list(ACTION_POLICY.get((viewer_context, status), ()))
