# Client Registry Test Suite
"""
Tests for the Client Registry.

Integration tests drive the HTTP API through FastAPI's TestClient;
unit tests cover the service and repositories directly.
"""
