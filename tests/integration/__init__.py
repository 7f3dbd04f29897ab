# Integration Tests
"""
Integration tests verify complete visitor and admin workflows through the
HTTP API.

Principle: Test behavior, not implementation.
"""
