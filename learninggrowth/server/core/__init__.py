"""Server constants."""
