"""Student Records Service - JSON file backed CRUD over student records."""

from student_records.api import create_app
from student_records.config import ConfigError, ServiceConfig, load_config
from student_records.storage import (
    DuplicateStudentError,
    InvalidStudentError,
    PersistenceError,
    StudentNotFoundError,
    StudentStorage,
    StudentStoreError,
)

__all__ = [
    "create_app",
    "ConfigError",
    "ServiceConfig",
    "load_config",
    "StudentStorage",
    "StudentStoreError",
    "InvalidStudentError",
    "DuplicateStudentError",
    "StudentNotFoundError",
    "PersistenceError",
]
