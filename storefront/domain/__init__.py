"""
Domain package for the Storefront Checkout Service.

Contains the request schemas exchanged with the storefront and the small
value types used by the services.
"""
