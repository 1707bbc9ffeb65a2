"""Target service HTTP API."""
