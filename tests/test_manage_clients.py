"""Tests for the manage_clients.py command line tool."""
import pytest

import manage_clients
from client_api.database import SEED_CLIENTS, get_db
from client_api.infrastructure.repositories import ClientRepository


@pytest.fixture
def repo(fresh_database):
    return ClientRepository(get_db())


def test_no_arguments_prints_usage(fresh_database, capsys):
    assert manage_clients.main([]) == 1
    assert "Usage:" in capsys.readouterr().out


def test_unknown_command(fresh_database, capsys):
    assert manage_clients.main(["frobnicate"]) == 1
    assert "Unknown command: frobnicate" in capsys.readouterr().out


def test_list_empty(fresh_database, capsys):
    assert manage_clients.main(["list"]) == 0
    assert "No clients found" in capsys.readouterr().out


def test_add_then_list(repo, capsys):
    code = manage_clients.main(
        ["add", "Ana Souza", "12345678900", "5000", "2003-08-20T07:50:00Z", "1"]
    )

    assert code == 0
    assert "created successfully" in capsys.readouterr().out
    assert repo.count() == 1

    assert manage_clients.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "Ana Souza" in out
    assert "12345678900" in out


def test_add_rejects_invalid_cpf(repo, capsys):
    code = manage_clients.main(["add", "Ana", "123", "5000", "2003-08-20T07:50:00Z", "1"])

    assert code == 1
    assert "cpf" in capsys.readouterr().out
    assert repo.count() == 0


def test_add_requires_all_arguments(repo, capsys):
    assert manage_clients.main(["add", "Ana"]) == 1
    assert repo.count() == 0


def test_delete_confirmed(repo, monkeypatch, capsys):
    manage_clients.main(["add", "Ana", "12345678900", "5000", "2003-08-20T07:50:00Z", "1"])
    monkeypatch.setattr("builtins.input", lambda _: "y")

    assert manage_clients.main(["delete", "1"]) == 0
    assert repo.count() == 0


def test_delete_cancelled(repo, monkeypatch):
    manage_clients.main(["add", "Ana", "12345678900", "5000", "2003-08-20T07:50:00Z", "1"])
    monkeypatch.setattr("builtins.input", lambda _: "n")

    assert manage_clients.main(["delete", "1"]) == 0
    assert repo.count() == 1


def test_delete_missing(repo, capsys):
    assert manage_clients.main(["delete", "77"]) == 1
    assert "not found" in capsys.readouterr().out


def test_delete_invalid_id(repo, capsys):
    assert manage_clients.main(["delete", "abc"]) == 1


def test_seed_only_into_empty_table(repo, capsys):
    assert manage_clients.main(["seed"]) == 0
    assert repo.count() == len(SEED_CLIENTS)

    assert manage_clients.main(["seed"]) == 0
    assert "nothing inserted" in capsys.readouterr().out
    assert repo.count() == len(SEED_CLIENTS)
