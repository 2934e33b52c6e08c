"""
CrossBuy - Cross-border Shopping Pricing and Fulfillment Core

Quotes marketplace prices in the customer's currency, freezes them into
cart snapshots and orders, consolidates orders into freight cargos and
splits the freight bill across the orders it carried.
"""

__version__ = "0.3.0"
