"""Target service background components."""
