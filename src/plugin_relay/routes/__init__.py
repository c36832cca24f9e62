"""HTTP routes for the relay."""
