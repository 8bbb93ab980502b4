"""Test configuration and fixtures for the Client Registry.

This module provides isolated test environments:
- Temporary database (SQLite) per test
- TestClient bound to the FastAPI app
- A client record created through the API, as most tests need one
"""
import os
import sys
from pathlib import Path
from typing import Generator, Dict

import pytest
from fastapi.testclient import TestClient

# Ensure client_api is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing app modules
os.environ["CLIENT_API_SEED_DATA"] = "false"
os.environ["CLIENT_API_LOG_LEVEL"] = "WARNING"


# Default create payload
LUCCA = {
    "name": "Lucca Henrique",
    "cpf": "12345678900",
    "income": 5000.0,
    "birthDate": "2003-08-20T07:50:00Z",
    "children": 1,
}


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, base_dir
    """
    return {
        "db_path": tmp_path / "test.db",
        "base_dir": tmp_path,
    }


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict):
    """Monkey-patch configuration to use the isolated database."""
    import client_api.config as config
    import client_api.database as db_module

    originals = {
        "DATABASE_PATH": db_module.DATABASE_PATH,
        "CONFIG_DATABASE_PATH": config.DATABASE_PATH,
        "SEED_DATA": config.SEED_DATA,
    }

    db_module.DATABASE_PATH = isolated_environment["db_path"]
    config.DATABASE_PATH = isolated_environment["db_path"]
    config.SEED_DATA = False

    yield isolated_environment

    db_module.DATABASE_PATH = originals["DATABASE_PATH"]
    config.DATABASE_PATH = originals["CONFIG_DATABASE_PATH"]
    config.SEED_DATA = originals["SEED_DATA"]


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict):
    """Initialize fresh database with schema for each test."""
    from client_api.database import init_db, close_db

    close_db()
    init_db()

    yield patched_config["db_path"]

    close_db()


@pytest.fixture(scope="function")
def db_connection(fresh_database: Path):
    """Raw connection to the test database for direct repository use."""
    from client_api.database import create_connection

    conn = create_connection(fresh_database)
    yield conn
    conn.close()


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/clients")
            assert response.status_code == 200
    """
    from client_api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_payload() -> Dict:
    """Fresh copy of a valid create payload."""
    return dict(LUCCA)


@pytest.fixture(scope="function")
def created_client(client: TestClient, client_payload: Dict) -> Dict:
    """Insert a client through the API and return the response body."""
    response = client.post("/clients/", json=client_payload)
    assert response.status_code == 201, f"Create failed: {response.text}"
    return response.json()


@pytest.fixture(scope="function")
def make_client(client: TestClient):
    """Factory that POSTs the default payload with overrides applied.

    Usage:
        def test_filter(make_client):
            rich = make_client(income=9000.0)
    """
    def _make(**overrides) -> Dict:
        payload = dict(LUCCA, **overrides)
        response = client.post("/clients", json=payload)
        assert response.status_code == 201, f"Create failed: {response.text}"
        return response.json()

    return _make
