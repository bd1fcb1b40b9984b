"""Core comic generation domain: types, errors, retry and pipeline modules."""
