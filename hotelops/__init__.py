"""Hotel operations backend."""
