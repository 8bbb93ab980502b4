"""Client service - CRUD and search over client records.

Maps repository rows to DTOs, wraps finder results in page envelopes and
turns missing ids into ResourceNotFoundError.
"""
import logging

from ...exceptions import ResourceNotFoundError
from ...infrastructure.repositories import ClientRepository
from ...schemas import ClientDTO, ClientInput, Page, PageRequest

logger = logging.getLogger(__name__)


class ClientService:
    """Service for client management operations.

    Responsibilities:
    - Client CRUD operations
    - Paged listing and filtering (income, income greater than, CPF prefix)
    - NotFound semantics for unknown ids
    """

    def __init__(self, client_repository: ClientRepository):
        self.client_repo = client_repository

    # ========================================================================
    # Queries
    # ========================================================================

    def find_all_paged(self, page_request: PageRequest) -> Page:
        rows, total = self.client_repo.find_all(*self._paging(page_request))
        return self._to_page(rows, total, page_request)

    def find_by_id(self, client_id: int) -> ClientDTO:
        """Get a single client.

        Raises:
            ResourceNotFoundError: If no client has this id
        """
        row = self.client_repo.get_by_id(client_id)
        if not row:
            raise ResourceNotFoundError()
        return ClientDTO.from_row(row)

    def find_by_income(self, income: float, page_request: PageRequest) -> Page:
        rows, total = self.client_repo.find_by_income(income, *self._paging(page_request))
        return self._to_page(rows, total, page_request)

    def find_by_income_greater_than(self, income: float, page_request: PageRequest) -> Page:
        rows, total = self.client_repo.find_by_income_greater_than(
            income, *self._paging(page_request)
        )
        return self._to_page(rows, total, page_request)

    def find_by_cpf_prefix(self, cpf: str, page_request: PageRequest) -> Page:
        rows, total = self.client_repo.find_by_cpf_prefix(cpf, *self._paging(page_request))
        return self._to_page(rows, total, page_request)

    # ========================================================================
    # Mutations
    # ========================================================================

    def insert(self, data: ClientInput) -> ClientDTO:
        """Persist a new client and return it with its assigned id."""
        client_id = self.client_repo.create(**data.to_fields())
        logger.info("Created client %d", client_id)
        return self.find_by_id(client_id)

    def update(self, client_id: int, data: ClientInput) -> ClientDTO:
        """Replace every mutable field of an existing client.

        Raises:
            ResourceNotFoundError: If no client has this id
        """
        if not self.client_repo.update(client_id, **data.to_fields()):
            raise ResourceNotFoundError()
        logger.info("Updated client %d", client_id)
        return self.find_by_id(client_id)

    def delete(self, client_id: int) -> None:
        """Remove a client.

        Raises:
            ResourceNotFoundError: If no client has this id
        """
        if not self.client_repo.delete(client_id):
            raise ResourceNotFoundError()
        logger.info("Deleted client %d", client_id)

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _paging(page_request: PageRequest) -> tuple:
        return (
            page_request.order_by,
            page_request.direction,
            page_request.lines_per_page,
            page_request.offset,
        )

    @staticmethod
    def _to_page(rows: list[dict], total: int, page_request: PageRequest) -> Page:
        return Page.of([ClientDTO.from_row(row) for row in rows], total, page_request)
