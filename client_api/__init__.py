"""Client registry API."""
