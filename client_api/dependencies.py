"""Shared FastAPI dependencies."""
from typing import Optional

from fastapi import Query

from . import config
from .application.services import ClientService
from .database import get_db
from .exceptions import InvalidPageRequestError
from .infrastructure.repositories import ClientRepository, SORT_COLUMNS
from .schemas import PageRequest


def get_page_request(
    page: int = Query(0, ge=0),
    lines_per_page: Optional[int] = Query(None, alias="linesPerPage", ge=1),
    direction: str = Query(config.DEFAULT_DIRECTION),
    order_by: str = Query(config.DEFAULT_ORDER_BY, alias="orderBy"),
) -> PageRequest:
    """Build a PageRequest from the page/linesPerPage/direction/orderBy query.

    Raises InvalidPageRequestError for values outside the accepted set.
    """
    if lines_per_page is None:
        lines_per_page = config.DEFAULT_PAGE_SIZE
    if lines_per_page > config.MAX_PAGE_SIZE:
        raise InvalidPageRequestError(
            "linesPerPage", f"must be at most {config.MAX_PAGE_SIZE}"
        )

    direction = direction.upper()
    if direction not in ("ASC", "DESC"):
        raise InvalidPageRequestError("direction", "must be ASC or DESC")

    if order_by not in SORT_COLUMNS:
        raise InvalidPageRequestError(
            "orderBy", f"must be one of: {', '.join(SORT_COLUMNS)}"
        )

    return PageRequest(
        page=page,
        lines_per_page=lines_per_page,
        direction=direction,
        order_by=order_by,
    )


def get_client_service() -> ClientService:
    """Create ClientService on the current thread's connection.

    Call from inside the route body so the connection belongs to the
    thread that runs the queries.
    """
    return ClientService(client_repository=ClientRepository(get_db()))
