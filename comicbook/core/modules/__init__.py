"""Comic pipeline modules."""
