"""
Student Storage - JSON file backed store for student records.

The file is the source of truth: every operation re-reads it and every
mutation rewrites it in full.

On-disk layout:
    {"students": [{"id": ..., "name": ..., "department": ..., "marks": ...}, ...]}

A bare list of records is also accepted on read and normalized to the
object form.
"""

import json
import logging
import math
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "name", "department", "marks")


class StudentStoreError(Exception):
    """Base error for student store operations."""

    status_code = 500


class InvalidStudentError(StudentStoreError):
    """Raised when a request payload is unusable."""

    status_code = 400


class DuplicateStudentError(StudentStoreError):
    """Raised when a create collides with an existing student id."""

    status_code = 409

    def __init__(self, student_id: Any):
        super().__init__("Student ID already exists")
        self.student_id = student_id


class StudentNotFoundError(StudentStoreError):
    """Raised when no student matches the requested id."""

    status_code = 404

    def __init__(self, student_id: Any):
        super().__init__("Student not found")
        self.student_id = student_id


class PersistenceError(StudentStoreError):
    """Raised when the data file could not be rewritten."""

    status_code = 500

    def __init__(self, operation: str):
        super().__init__(f"Failed to {operation} data")
        self.operation = operation


def empty_store() -> dict:
    return {"students": []}


def normalize_store(parsed: Any) -> dict:
    """
    Normalize a parsed data file into the canonical store shape.

    Accepts an object carrying a ``students`` list (kept as is, including any
    other top-level keys) or a bare list of records. Anything else is
    treated as an empty store.
    """
    if isinstance(parsed, dict) and isinstance(parsed.get("students"), list):
        return parsed
    if isinstance(parsed, list):
        return {"students": parsed}
    return empty_store()


def missing_fields(record: Any) -> list[str]:
    """
    Return the required fields a new record lacks.

    A field counts as missing when it is absent or falsy, so ``marks: 0``
    is reported as missing.
    """
    if not isinstance(record, dict):
        return list(REQUIRED_FIELDS)
    return [name for name in REQUIRED_FIELDS if not record.get(name)]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def loads_strict(data: str | bytes) -> Any:
    """
    Parse JSON, rejecting NaN, Infinity and numbers that overflow a float.

    Raises:
        ValueError: the text is not strict JSON
    """
    return json.loads(data, parse_constant=_reject_constant, parse_float=_finite_float)


def update_fields(body: Any) -> dict:
    """
    Turn a parsed update body into the fields to merge.

    Objects merge as is. Arrays and strings merge their elements under
    index keys ("0", "1", ...). Any other value merges nothing.
    """
    if isinstance(body, dict):
        return body
    if isinstance(body, (list, str)):
        return {str(index): value for index, value in enumerate(body)}
    return {}


def _record_id(record: Any) -> Any:
    return record.get("id") if isinstance(record, dict) else None


class StudentStorage:
    """
    Data access layer for the student records file.

    All mutations go through this class so the id uniqueness check and the
    rewrite happen under one lock.
    """

    def __init__(self, data_file: Path | str):
        """
        Initialize student storage.

        Args:
            data_file: Path to the JSON data file (created on first read)
        """
        self._data_file = Path(data_file)
        self._lock = threading.Lock()

        logger.info(f"StudentStorage initialized at {self._data_file}")

    @property
    def data_file(self) -> Path:
        return self._data_file

    def read(self) -> dict:
        """
        Load the store from disk.

        Creates the file with an empty store when it does not exist. Read or
        parse failures are logged and yield an empty store.

        Returns:
            Store dict in the canonical ``{"students": [...]}`` shape
        """
        try:
            if not self._data_file.exists():
                store = empty_store()
                self._data_file.parent.mkdir(parents=True, exist_ok=True)
                with open(self._data_file, "w", encoding="utf-8") as f:
                    json.dump(store, f)
                return store

            with open(self._data_file, encoding="utf-8") as f:
                content = f.read()

            if not content.strip():
                return empty_store()

            return normalize_store(loads_strict(content))

        except ValueError as e:
            logger.error(f"Failed to parse data file {self._data_file}: {e}")
        except OSError as e:
            logger.error(f"Failed to read data file {self._data_file}: {e}")
        return empty_store()

    def write(self, store: dict) -> bool:
        """
        Rewrite the data file with the given store.

        Args:
            store: Store dict to persist

        Returns:
            True if the file was replaced
        """
        # Write atomically via temp file
        temp_path = self._data_file.with_suffix(self._data_file.suffix + ".tmp")
        try:
            self._data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(store, f, indent=4, allow_nan=False)

            temp_path.replace(self._data_file)
            logger.debug(f"Persisted {len(store.get('students', []))} students to {self._data_file}")
            return True

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write data file {self._data_file}: {e}")
            if temp_path.exists():
                temp_path.unlink()
            return False

    def list_students(self) -> list[dict]:
        """Return every stored record in insertion order."""
        return self.read()["students"]

    def create_student(self, record: dict) -> dict:
        """
        Append a new record.

        Args:
            record: Record dict; stored exactly as given

        Returns:
            The stored record

        Raises:
            DuplicateStudentError: a record with the same id exists
            PersistenceError: the data file could not be rewritten
        """
        student_id = record.get("id")
        with self._lock:
            store = self.read()
            if any(_record_id(s) == student_id for s in store["students"]):
                raise DuplicateStudentError(student_id)

            store["students"].append(record)
            if not self.write(store):
                raise PersistenceError("save")

        logger.info(f"Created student {student_id}")
        return record

    def update_student(self, student_id: str, updates: dict) -> dict:
        """
        Shallow-merge ``updates`` onto the record with ``student_id``.

        Fields absent from ``updates`` are preserved. An ``id`` in
        ``updates`` is merged like any other field.

        Returns:
            The merged record

        Raises:
            StudentNotFoundError: no record has that id
            PersistenceError: the data file could not be rewritten
        """
        with self._lock:
            store = self.read()
            students = store["students"]

            for index, existing in enumerate(students):
                if _record_id(existing) == student_id:
                    break
            else:
                raise StudentNotFoundError(student_id)

            merged = {**existing, **updates}
            students[index] = merged
            if not self.write(store):
                raise PersistenceError("update")

        logger.info(f"Updated student {student_id}")
        return merged

    def delete_student(self, student_id: str) -> None:
        """
        Remove every record with ``student_id``.

        Raises:
            StudentNotFoundError: no record has that id
            PersistenceError: the data file could not be rewritten
        """
        with self._lock:
            store = self.read()
            remaining = [s for s in store["students"] if _record_id(s) != student_id]

            if len(remaining) == len(store["students"]):
                raise StudentNotFoundError(student_id)

            store["students"] = remaining
            if not self.write(store):
                raise PersistenceError("delete")

        logger.info(f"Deleted student {student_id}")

    def get_storage_stats(self) -> dict[str, Any]:
        """
        Get storage statistics.

        Returns:
            Dict with data file path, size and record count
        """
        size = self._data_file.stat().st_size if self._data_file.exists() else 0
        return {
            "data_file": str(self._data_file),
            "size_bytes": size,
            "student_count": len(self.list_students()),
        }
