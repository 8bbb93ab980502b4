"""Client repository - all SQL for the clients table.

Every finder returns a ``(rows, total)`` tuple: ``rows`` is the requested
slice as a list of dicts, ``total`` the number of matching rows before
LIMIT/OFFSET is applied.
"""
from datetime import datetime
from typing import Optional, List, Dict, Tuple

from .base import Repository, AsyncRepository, fits_sqlite_integer, SQLITE_MAX_INTEGER

# Sortable columns (API field name -> column)
SORT_COLUMNS = {
    "id": "id",
    "name": "name",
    "cpf": "cpf",
    "income": "income",
    "birthDate": "birth_date",
    "children": "children",
}

UPDATABLE_FIELDS = {"name", "cpf", "income", "birth_date", "children"}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _order_clause(order_by: str, direction: str) -> str:
    if order_by not in SORT_COLUMNS:
        raise ValueError(f"Unsupported sort field: {order_by}")
    direction = direction.upper()
    if direction not in ("ASC", "DESC"):
        raise ValueError(f"Unsupported sort direction: {direction}")

    column = SORT_COLUMNS[order_by]
    if column == "id":
        return f"ORDER BY id {direction}"
    # id breaks ties so pages are stable
    return f"ORDER BY {column} {direction}, id ASC"


def _clamp_offset(offset: int) -> int:
    # Any offset past the INTEGER range is past the last row anyway
    return min(offset, SQLITE_MAX_INTEGER)


def _page_queries(
    where: str,
    order_by: str,
    direction: str
) -> Tuple[str, str]:
    """Build (select, count) SQL for a filtered, sorted page."""
    where_sql = f" WHERE {where}" if where else ""
    select_sql = (
        f"SELECT * FROM clients{where_sql} "
        f"{_order_clause(order_by, direction)} LIMIT ? OFFSET ?"
    )
    count_sql = f"SELECT COUNT(*) AS total FROM clients{where_sql}"
    return select_sql, count_sql


# Filters shared by the sync and async repositories
INCOME_EQUALS = "income = ?"
INCOME_GREATER_THAN = "income > ?"
CPF_PREFIX = "cpf LIKE ? ESCAPE '\\'"


class ClientRepository(Repository):
    """Repository for client entity operations.

    Examples:
        >>> repo = ClientRepository(db)
        >>> client_id = repo.create("Ana", "12345678900", 5000.0, birth_date, 1)
        >>> rows, total = repo.find_by_cpf_prefix("123", "name", "ASC", 12, 0)
    """

    def create(
        self,
        name: str,
        cpf: str,
        income: float,
        birth_date: datetime,
        children: int
    ) -> int:
        """Insert a client.

        Returns:
            New client ID
        """
        cursor = self._execute(
            """INSERT INTO clients (name, cpf, income, birth_date, children)
               VALUES (?, ?, ?, ?, ?)""",
            (name, cpf, income, birth_date, children)
        )
        self._commit()
        return cursor.lastrowid

    def get_by_id(self, client_id: int) -> Optional[Dict]:
        """Get client by ID."""
        if not fits_sqlite_integer(client_id):
            return None
        cursor = self._execute("SELECT * FROM clients WHERE id = ?", (client_id,))
        return self._row_to_dict(cursor.fetchone())

    def update(self, client_id: int, **kwargs) -> bool:
        """Update client fields.

        Returns:
            True if a row was updated
        """
        updates = {k: v for k, v in kwargs.items() if k in UPDATABLE_FIELDS}
        if not updates:
            return False
        if not fits_sqlite_integer(client_id):
            return False

        set_clause = ", ".join(f"{k} = ?" for k in updates.keys())
        values = list(updates.values()) + [client_id]

        cursor = self._execute(
            f"UPDATE clients SET {set_clause} WHERE id = ?",
            tuple(values)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, client_id: int) -> bool:
        """Delete client. Returns True if a row was removed."""
        if not fits_sqlite_integer(client_id):
            return False
        cursor = self._execute("DELETE FROM clients WHERE id = ?", (client_id,))
        self._commit()
        return cursor.rowcount > 0

    def count(self) -> int:
        cursor = self._execute("SELECT COUNT(*) AS total FROM clients")
        return cursor.fetchone()["total"]

    # =========================================================================
    # Paged finders
    # =========================================================================

    def find_all(
        self,
        order_by: str,
        direction: str,
        limit: int,
        offset: int
    ) -> Tuple[List[Dict], int]:
        """Get one page of all clients."""
        return self._find_page("", (), order_by, direction, limit, offset)

    def find_by_income(
        self,
        income: float,
        order_by: str,
        direction: str,
        limit: int,
        offset: int
    ) -> Tuple[List[Dict], int]:
        """Get clients whose income equals the value exactly."""
        return self._find_page(INCOME_EQUALS, (income,), order_by, direction, limit, offset)

    def find_by_income_greater_than(
        self,
        income: float,
        order_by: str,
        direction: str,
        limit: int,
        offset: int
    ) -> Tuple[List[Dict], int]:
        """Get clients with income strictly greater than the threshold."""
        return self._find_page(INCOME_GREATER_THAN, (income,), order_by, direction, limit, offset)

    def find_by_cpf_prefix(
        self,
        prefix: str,
        order_by: str,
        direction: str,
        limit: int,
        offset: int
    ) -> Tuple[List[Dict], int]:
        """Get clients whose CPF starts with prefix."""
        return self._find_page(
            CPF_PREFIX, (escape_like(prefix) + "%",), order_by, direction, limit, offset
        )

    def _find_page(
        self,
        where: str,
        parameters: tuple,
        order_by: str,
        direction: str,
        limit: int,
        offset: int
    ) -> Tuple[List[Dict], int]:
        select_sql, count_sql = _page_queries(where, order_by, direction)
        total = self._execute(count_sql, parameters).fetchone()["total"]
        cursor = self._execute(select_sql, parameters + (limit, _clamp_offset(offset)))
        return [self._row_to_dict(row) for row in cursor.fetchall()], total


class AsyncClientRepository(AsyncRepository):
    """Async repository for client entity operations."""

    async def create(
        self,
        name: str,
        cpf: str,
        income: float,
        birth_date: datetime,
        children: int
    ) -> int:
        cursor = await self._execute(
            """INSERT INTO clients (name, cpf, income, birth_date, children)
               VALUES (?, ?, ?, ?, ?)""",
            (name, cpf, income, birth_date, children)
        )
        await self._commit()
        return cursor.lastrowid

    async def get_by_id(self, client_id: int) -> Optional[Dict]:
        if not fits_sqlite_integer(client_id):
            return None
        return await self._fetchone("SELECT * FROM clients WHERE id = ?", (client_id,))

    async def update(self, client_id: int, **kwargs) -> bool:
        updates = {k: v for k, v in kwargs.items() if k in UPDATABLE_FIELDS}
        if not updates:
            return False
        if not fits_sqlite_integer(client_id):
            return False

        set_clause = ", ".join(f"{k} = ?" for k in updates.keys())
        values = list(updates.values()) + [client_id]

        cursor = await self._execute(
            f"UPDATE clients SET {set_clause} WHERE id = ?",
            tuple(values)
        )
        await self._commit()
        return cursor.rowcount > 0

    async def delete(self, client_id: int) -> bool:
        if not fits_sqlite_integer(client_id):
            return False
        cursor = await self._execute("DELETE FROM clients WHERE id = ?", (client_id,))
        await self._commit()
        return cursor.rowcount > 0

    async def find_all(self, order_by, direction, limit, offset) -> Tuple[List[Dict], int]:
        return await self._find_page("", (), order_by, direction, limit, offset)

    async def find_by_income(self, income, order_by, direction, limit, offset):
        return await self._find_page(INCOME_EQUALS, (income,), order_by, direction, limit, offset)

    async def find_by_income_greater_than(self, income, order_by, direction, limit, offset):
        return await self._find_page(INCOME_GREATER_THAN, (income,), order_by, direction, limit, offset)

    async def find_by_cpf_prefix(self, prefix, order_by, direction, limit, offset):
        return await self._find_page(
            CPF_PREFIX, (escape_like(prefix) + "%",), order_by, direction, limit, offset
        )

    async def _find_page(self, where, parameters, order_by, direction, limit, offset):
        select_sql, count_sql = _page_queries(where, order_by, direction)
        total = (await self._fetchone(count_sql, parameters))["total"]
        rows = await self._fetchall(select_sql, parameters + (limit, _clamp_offset(offset)))
        return rows, total
