"""
Storefront Checkout Service - Integration layer behind the storefront SPA.

This package bridges the storefront with its payment gateway, commerce backend
and image host: it creates payment orders, confirms payments into commerce
orders, uploads customer designs and reports shipment status.
"""

__version__ = "0.1.0"
