# tests/conftest.py
# Pytest fixtures. Run: pytest tests/ -v

import pytest
from fastapi.testclient import TestClient

from backend import app


@pytest.fixture
def client():
    return TestClient(app)
