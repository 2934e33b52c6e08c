# tests/test_app.py
"""
Application Tests - Service wiring and the operator CLI

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- crossbuy.app (build_services, main)
- unittest.mock (client stub, logging patch)
- pytest (testing framework)
"""
from unittest.mock import patch

import pytest

from crossbuy.app import build_services, main


@pytest.fixture
def services(store, catalog, client):
    built = build_services(store=store, client=client, catalog=catalog)
    yield built
    built.shutdown()


class TestBuildServices:
    def test_shares_one_store(self, services, store):
        assert services.cart.store is store
        assert services.orders.store is store
        assert services.logistics.store is store
        assert services.rate_source.currency_rates is services.currency_rates

    def test_end_to_end_checkout(self, services):
        services.cart.add_line("u1", "mock-1", quantity=2, currency="RUB")
        order = services.orders.create_from_cart("u1")
        receipt = services.logistics.create_cargo([order.id], shipping_cost="30")
        services.logistics.arrive(receipt.cargo_id)

        tracking = services.logistics.tracking(order.id)
        assert tracking.total == order.subtotal + tracking.delivery_fee
        assert str(tracking.delivery_fee) == "30.00"


@patch('crossbuy.app.setup_logging')
class TestMain:
    def test_quote(self, mock_logging, services, capsys):
        assert main(["quote", "100", "--to", "RUB"], services=services) == 0
        out = capsys.readouterr().out
        assert "100.00 CNY -> RUB" in out
        assert "Final per item: 1405.95 RUB" in out
        mock_logging.assert_called_once()

    def test_rate(self, mock_logging, services, capsys):
        assert main(["rate", "EUR"], services=services) == 0
        assert "1 CNY = 12.5 EUR (market)" in capsys.readouterr().out

    def test_rates(self, mock_logging, services, capsys):
        assert main(["rates"], services=services) == 0
        out = capsys.readouterr().out
        assert "RUB ₽" in out
        assert "KZT ₸" in out

    def test_invalid_amount(self, mock_logging, services, capsys):
        assert main(["quote", "-5"], services=services) == 2
        assert "Error:" in capsys.readouterr().err

    def test_amount_over_limit(self, mock_logging, services, capsys):
        assert main(["quote", "1e20"], services=services) == 2
        assert "must be <=" in capsys.readouterr().err

    def test_simulate_walks_order_to_arrival(self, mock_logging, services, capsys):
        argv = ["simulate", "mock-1", "--qty", "2", "--to", "RUB", "--shipping", "30"]
        assert main(argv, services=services) == 0
        out = capsys.readouterr().out
        assert "Mock product 1 x2: 688.92 RUB = 1377.84 RUB" in out
        assert "Subtotal: 1377.84 RUB" in out
        assert ": arrived" in out
        assert "awaiting_delivery_payment" in out
        assert "Delivery fee: 30.00, total: 1407.84" in out
        assert services.cart.get_cart("simulation").is_empty

    def test_simulate_unknown_product(self, mock_logging, services, capsys):
        assert main(["simulate", "nope"], services=services) == 2
        assert "Error:" in capsys.readouterr().err
