# School Gallery Test Suite
"""
Test suite for the school gallery.

Integration tests go through the HTTP API on the local backend; unit tests
cover services and gateways with mocked dependencies.
"""
