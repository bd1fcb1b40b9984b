"""Integration tests that call real model APIs.

These are skipped unless the matching API keys are set. Run with:
    pytest tests/integration -v -m slow
"""
