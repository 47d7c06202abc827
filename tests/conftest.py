"""Shared fixtures for the student records tests."""

import pytest
from fastapi.testclient import TestClient

from student_records.api import create_app
from student_records.config import ENV_MAPPINGS
from student_records.storage import StudentStorage


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment settings out of config tests."""
    for env_key in ENV_MAPPINGS:
        monkeypatch.delenv(env_key, raising=False)
    monkeypatch.delenv("STUDENTS_CONFIG", raising=False)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "students.json"


@pytest.fixture
def storage(data_file):
    return StudentStorage(data_file)


@pytest.fixture
def client(storage):
    """Test client over a fresh data file and the packaged assets."""
    return TestClient(create_app(storage=storage))


@pytest.fixture
def sample_student():
    return {"id": "S-101", "name": "Asha Rao", "department": "CSE", "marks": 88}
