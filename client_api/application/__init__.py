"""Application layer - business logic."""
