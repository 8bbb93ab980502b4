"""Request and response models.

Field names are snake_case in Python and camelCase on the wire
(``birth_date`` <-> ``birthDate``, ``total_elements`` <-> ``totalElements``).
"""
import math
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from . import config
from .infrastructure.repositories.base import SQLITE_MAX_INTEGER


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientBase(CamelModel):
    name: str
    cpf: str = Field(pattern=r"^\d{11}$")
    income: float = Field(ge=0, allow_inf_nan=False)
    birth_date: datetime
    children: int = Field(ge=0, le=SQLITE_MAX_INTEGER)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("birth_date")
    @classmethod
    def birth_date_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class ClientInput(ClientBase):
    """Payload for create and update. A client-supplied id is ignored."""
    id: Optional[int] = None

    @field_validator("birth_date")
    @classmethod
    def birth_date_not_in_future(cls, value: datetime) -> datetime:
        if value > datetime.now(timezone.utc):
            raise ValueError("birthDate must not be in the future")
        return value

    def to_fields(self) -> dict:
        """Column values for the repository (everything except id)."""
        return self.model_dump(exclude={"id"})


class ClientDTO(ClientBase):
    """Client as returned by the API."""
    id: int

    @classmethod
    def from_row(cls, row: dict) -> "ClientDTO":
        return cls(
            id=row["id"],
            name=row["name"],
            cpf=row["cpf"],
            income=row["income"],
            birth_date=row["birth_date"],
            children=row["children"],
        )


class PageRequest(BaseModel):
    """Validated paging and sorting parameters."""
    page: int = 0
    lines_per_page: int = config.DEFAULT_PAGE_SIZE
    direction: str = config.DEFAULT_DIRECTION
    order_by: str = config.DEFAULT_ORDER_BY

    @property
    def offset(self) -> int:
        return self.page * self.lines_per_page


class Page(CamelModel):
    """Page envelope: one slice of results plus pagination metadata."""
    content: List[ClientDTO]
    total_elements: int
    total_pages: int
    size: int
    number: int
    number_of_elements: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def of(cls, content: List[ClientDTO], total: int, page_request: PageRequest) -> "Page":
        size = page_request.lines_per_page
        total_pages = math.ceil(total / size) if size else 0
        return cls(
            content=content,
            total_elements=total,
            total_pages=total_pages,
            size=size,
            number=page_request.page,
            number_of_elements=len(content),
            first=page_request.page == 0,
            last=page_request.page >= total_pages - 1,
            empty=not content,
        )


class StandardError(CamelModel):
    """Error envelope shared by every 4xx response."""
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str


class FieldMessage(CamelModel):
    field_name: str
    message: str


class ValidationErrorBody(StandardError):
    errors: List[FieldMessage] = []
