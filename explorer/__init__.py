"""Runway Explorer core: gateways, provider adapter, exploration chain and frame capture."""
