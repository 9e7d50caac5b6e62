"""API gateway: path-based routing, bearer-token gating and proxying."""
