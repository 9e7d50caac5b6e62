"""
Storefront Backend: Application Package
=======================================

What: Toy e-commerce backend made of independent HTTP services.
How:  Each service is its own FastAPI application built by a create_app()
      factory and sharing the same config, error and logging plumbing.

Package layout:

    ┌─────────────────────────────────────────────┐
    │  gateway/   API gateway (auth gate + proxy)  │  :3000
    ├─────────────────────────────────────────────┤
    │  products/  in-memory product catalog        │  :3002
    ├─────────────────────────────────────────────┤
    │  cart/      Redis-backed per-user carts      │  :3003
    ├─────────────────────────────────────────────┤
    │  config, exceptions, bootstrap, middleware   │  shared
    └─────────────────────────────────────────────┘

The user, order and notification services are external collaborators; the
gateway only knows their base URLs.
"""

__version__ = "1.0.0"
