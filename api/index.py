"""Vercel serverless entrypoint.

Vercel serves the ASGI ``app`` exported here; ``vercel.json`` rewrites every
``/api/*`` path to this function so FastAPI does the routing.
"""

from storefront.main import app

__all__ = ["app"]
