"""Tests for ClientRepository against a real SQLite file."""
from datetime import datetime, timezone

import pytest

from client_api.infrastructure.repositories import ClientRepository
from client_api.infrastructure.repositories.client_repository import escape_like


BIRTH = datetime(1990, 5, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo(db_connection):
    return ClientRepository(db_connection)


def add(repo, name="Ana", cpf="12345678900", income=1000.0, children=0):
    return repo.create(name=name, cpf=cpf, income=income, birth_date=BIRTH, children=children)


class TestCrud:

    def test_create_and_get(self, repo):
        client_id = add(repo, name="Ana")

        row = repo.get_by_id(client_id)

        assert row["name"] == "Ana"
        assert row["birth_date"] == BIRTH
        assert isinstance(row["birth_date"], datetime)

    def test_get_missing(self, repo):
        assert repo.get_by_id(12345) is None

    def test_update_ignores_unknown_fields(self, repo):
        client_id = add(repo)

        assert repo.update(client_id, name="Bia", id=99, password="x") is True

        row = repo.get_by_id(client_id)
        assert row["name"] == "Bia"
        assert row["id"] == client_id

    def test_update_nothing_to_change(self, repo):
        client_id = add(repo)
        assert repo.update(client_id) is False

    def test_update_missing(self, repo):
        assert repo.update(12345, name="Nobody") is False

    @pytest.mark.parametrize("client_id", [2 ** 63, -(2 ** 63) - 1, 2 ** 64])
    def test_ids_outside_integer_range_match_nothing(self, repo, client_id):
        add(repo)

        assert repo.get_by_id(client_id) is None
        assert repo.update(client_id, name="Nobody") is False
        assert repo.delete(client_id) is False
        assert repo.count() == 1

    def test_largest_integer_id_is_a_plain_miss(self, repo):
        assert repo.get_by_id(2 ** 63 - 1) is None

    def test_offset_beyond_integer_range_returns_empty_page(self, repo):
        add(repo)

        rows, total = repo.find_all("name", "ASC", 12, 2 ** 70)

        assert rows == []
        assert total == 1
        assert repo.count() == 0

    def test_delete(self, repo):
        client_id = add(repo)

        assert repo.delete(client_id) is True
        assert repo.delete(client_id) is False
        assert repo.count() == 0


class TestFinders:

    def test_find_all_total_ignores_limit(self, repo):
        for i in range(5):
            add(repo, name=f"Client {i}")

        rows, total = repo.find_all("name", "ASC", limit=2, offset=4)

        assert total == 5
        assert [r["name"] for r in rows] == ["Client 4"]

    def test_find_by_income_greater_than(self, repo):
        add(repo, name="Low", income=100.0)
        add(repo, name="High", income=900.0)

        rows, total = repo.find_by_income_greater_than(100.0, "name", "ASC", 10, 0)

        assert total == 1
        assert rows[0]["name"] == "High"

    def test_cpf_prefix_with_like_wildcards(self, repo):
        add(repo, cpf="12345678900")

        assert repo.find_by_cpf_prefix("1_3", "id", "ASC", 10, 0)[1] == 0
        assert repo.find_by_cpf_prefix("123", "id", "ASC", 10, 0)[1] == 1

    def test_unknown_sort_field(self, repo):
        with pytest.raises(ValueError):
            repo.find_all("name; DROP TABLE clients", "ASC", 10, 0)

    def test_unknown_direction(self, repo):
        with pytest.raises(ValueError):
            repo.find_all("name", "UP", 10, 0)


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
