# tests/test_state_machine.py
"""
State Machine Tests - Order status transitions and parsing

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- crossbuy.domain.status (OrderStatus, can_transition, transition)
- pytest (testing framework)
"""
import pytest

from crossbuy.domain.errors import InvalidInputError, InvalidStateError
from crossbuy.domain.status import TERMINAL_STATUSES, OrderStatus, can_transition, transition


class TestTransitions:
    def test_cargo_flow(self):
        assert can_transition(OrderStatus.PENDING_PROCESSING, OrderStatus.IN_TRANSIT)
        assert can_transition(OrderStatus.IN_TRANSIT, OrderStatus.AWAITING_DELIVERY_PAYMENT)

    def test_arrival_replay_self_loop(self):
        assert can_transition(
            OrderStatus.AWAITING_DELIVERY_PAYMENT, OrderStatus.AWAITING_DELIVERY_PAYMENT
        )

    def test_purchase_flow(self):
        assert can_transition(OrderStatus.PENDING_PROCESSING, OrderStatus.PROCURED)
        assert can_transition(OrderStatus.PROCURED, OrderStatus.IN_TRANSIT)

    def test_no_way_back(self):
        assert not can_transition(OrderStatus.IN_TRANSIT, OrderStatus.PENDING_PROCESSING)
        assert not can_transition(OrderStatus.PENDING_PROCESSING, OrderStatus.AWAITING_DELIVERY_PAYMENT)

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
    def test_terminal_statuses_have_no_exits(self, terminal):
        for target in OrderStatus:
            assert not can_transition(terminal, target)

    def test_transition_raises_on_illegal_move(self):
        assert transition(OrderStatus.PENDING_PROCESSING, OrderStatus.PROCURED) is OrderStatus.PROCURED
        with pytest.raises(InvalidStateError, match="cannot move"):
            transition(OrderStatus.DELIVERED, OrderStatus.IN_TRANSIT)


class TestParse:
    def test_parse_value_and_name(self):
        assert OrderStatus.parse("in_transit") is OrderStatus.IN_TRANSIT
        assert OrderStatus.parse("DELIVERED") is OrderStatus.DELIVERED
        assert OrderStatus.parse(OrderStatus.PROCURED) is OrderStatus.PROCURED

    def test_parse_unknown(self):
        with pytest.raises(InvalidInputError):
            OrderStatus.parse("lost")
