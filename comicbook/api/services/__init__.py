"""Services for comic job bookkeeping and generation."""
