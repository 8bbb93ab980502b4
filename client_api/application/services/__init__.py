"""Application services - business logic layer."""

from .client_service import ClientService

__all__ = [
    "ClientService",
]
