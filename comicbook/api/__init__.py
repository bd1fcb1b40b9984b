"""HTTP surface, job bookkeeping and orchestration for comic generation."""
