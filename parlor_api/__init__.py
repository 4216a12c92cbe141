"""HTTP API for inspecting and resetting player profiles."""
