import pytest

from apps.orders.models import OrderStatus
from apps.orders.policies import (
    ACTION_MESSAGE,
    ACTION_POLICY,
    BUYER,
    BUYER_AND_SELLER,
    SELLER,
    TRANSITIONS,
    VIEWER_CONTEXTS,
    allowed_actions,
    resolve_viewer_context,
)


def test_policy_covers_every_context_and_status():
    expected = {(ctx, status) for ctx in VIEWER_CONTEXTS for status in OrderStatus.values}
    assert set(ACTION_POLICY) == expected


@pytest.mark.parametrize("status", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
@pytest.mark.parametrize("context", VIEWER_CONTEXTS)
def test_terminal_statuses_allow_nothing(context, status):
    assert allowed_actions(context, status) == []


@pytest.mark.parametrize("status", OrderStatus.values)
def test_combined_context_is_ordered_union(status):
    buyer = allowed_actions(BUYER, status)
    seller = allowed_actions(SELLER, status)
    combined = allowed_actions(BUYER_AND_SELLER, status)
    assert combined[: len(buyer)] == buyer
    assert set(combined) == set(buyer) | set(seller)
    assert len(combined) == len(set(combined))


def test_every_non_message_action_is_a_transition():
    actions = {a for allowed in ACTION_POLICY.values() for a in allowed}
    assert actions - {ACTION_MESSAGE} == set(TRANSITIONS)
    assert set(TRANSITIONS.values()) <= set(OrderStatus.values)


def test_seller_pending_actions():
    assert allowed_actions(SELLER, OrderStatus.PENDING) == ["confirm", "cancel", "message"]


def test_buyer_shipped_actions():
    assert allowed_actions(BUYER, OrderStatus.SHIPPED) == ["complete", "message"]


def test_unknown_context_allows_nothing():
    assert allowed_actions("auditor", OrderStatus.PENDING) == []


@pytest.mark.parametrize(
    "user_id, buyer_id, sellers, expected",
    [
        (1, 1, [2, 3], BUYER),
        (2, 1, [2, 3], SELLER),
        (1, 1, [1, 2], BUYER_AND_SELLER),
        (9, 1, [2, 3], None),
        (2, 1, [], None),
    ],
)
def test_resolve_viewer_context(user_id, buyer_id, sellers, expected):
    assert resolve_viewer_context(user_id, buyer_id, sellers) == expected


def test_resolve_viewer_context_accepts_generators():
    assert resolve_viewer_context(5, 1, (s for s in [4, 5])) == SELLER
