"""Client resource routes."""
from fastapi import APIRouter, Depends, Query, Response, status

from ..dependencies import get_client_service, get_page_request
from ..schemas import ClientDTO, ClientInput, Page, PageRequest, StandardError, ValidationErrorBody

router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    responses={400: {"model": ValidationErrorBody}},
)

NOT_FOUND = {404: {"model": StandardError}}


# === Queries ===

@router.get("", response_model=Page)
@router.get("/", response_model=Page, include_in_schema=False)
def find_all(page_request: PageRequest = Depends(get_page_request)):
    """List clients, one page at a time."""
    service = get_client_service()
    return service.find_all_paged(page_request)


@router.get("/id/{client_id}", response_model=ClientDTO, responses=NOT_FOUND)
def find_by_id(client_id: int):
    """Get a single client by id."""
    service = get_client_service()
    return service.find_by_id(client_id)


@router.get("/income", response_model=Page)
@router.get("/income/", response_model=Page, include_in_schema=False)
def find_by_income(
    income: float = Query(...),
    page_request: PageRequest = Depends(get_page_request)
):
    """Clients whose income equals the value exactly."""
    service = get_client_service()
    return service.find_by_income(income, page_request)


@router.get("/incomeGreaterThan", response_model=Page)
@router.get("/incomeGreaterThan/", response_model=Page, include_in_schema=False)
def find_by_income_greater_than(
    income: float = Query(...),
    page_request: PageRequest = Depends(get_page_request)
):
    """Clients with income strictly greater than the threshold."""
    service = get_client_service()
    return service.find_by_income_greater_than(income, page_request)


@router.get("/cpf", response_model=Page)
@router.get("/cpf/", response_model=Page, include_in_schema=False)
def find_by_cpf(
    cpf: str = Query(...),
    page_request: PageRequest = Depends(get_page_request)
):
    """Clients whose CPF starts with the given prefix."""
    service = get_client_service()
    return service.find_by_cpf_prefix(cpf, page_request)


# === Mutations ===

@router.post("", response_model=ClientDTO, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ClientDTO, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def insert(data: ClientInput, response: Response):
    """Create a client. Any id in the payload is ignored."""
    service = get_client_service()
    client = service.insert(data)
    response.headers["Location"] = f"{router.prefix}/id/{client.id}"
    return client


@router.put("/{client_id}", response_model=ClientDTO, responses=NOT_FOUND)
def update(client_id: int, data: ClientInput):
    """Replace every field of an existing client."""
    service = get_client_service()
    return service.update(client_id, data)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def delete(client_id: int):
    """Delete a client."""
    service = get_client_service()
    service.delete(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
