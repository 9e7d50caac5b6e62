"""Per-user shopping carts stored in Redis."""
