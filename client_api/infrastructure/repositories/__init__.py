# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each entity has its own repository.

Usage:
    repo = ClientRepository(get_db())
    client = repo.get_by_id(client_id)
"""
from .base import Repository, ConnectionProtocol, AsyncRepository
from .client_repository import ClientRepository, AsyncClientRepository, SORT_COLUMNS

__all__ = [
    "Repository",
    "ConnectionProtocol",
    "AsyncRepository",
    "ClientRepository",
    "AsyncClientRepository",
    "SORT_COLUMNS",
]
