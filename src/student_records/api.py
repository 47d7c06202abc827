"""
Student Records API - FastAPI endpoints over the JSON record store.

Endpoints:
    GET     /students       - List all students
    POST    /students       - Create a student
    PUT     /students/{id} - Shallow-merge fields onto a student
    DELETE  /students/{id}  - Delete a student
    OPTIONS *               - CORS preflight (204, empty)
    ANY     /, /index.html, /style.css, /script.js - Page assets

Anything else answers 404 "Not Found" as plain text.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models import ErrorResponse, MessageResponse
from .static_assets import create_static_router
from .storage import (
    InvalidStudentError,
    StudentStorage,
    StudentStoreError,
    loads_strict,
    missing_fields,
    update_fields,
)

logger = logging.getLogger(__name__)

STUDENT_ID_PATTERN = re.compile(r"[A-Za-z0-9\-_]+")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON or raise a 400."""
    body = await request.body()
    try:
        return loads_strict(body)
    except ValueError:
        raise InvalidStudentError("Invalid JSON")


def check_student_id(student_id: str) -> None:
    """Reject ids outside the route pattern as a routing miss."""
    if not STUDENT_ID_PATTERN.fullmatch(student_id):
        raise StarletteHTTPException(status_code=404)


def create_app(
    storage: StudentStorage,
    static_dir: Path | str | None = None,
) -> FastAPI:
    """
    Create FastAPI application with student record endpoints.

    Args:
        storage: StudentStorage backing the CRUD routes
        static_dir: Directory with the page assets (packaged assets if None)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Student Records Service",
        description="CRUD over a JSON file of student records",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )

    @app.middleware("http")
    async def cors_and_request_log(request: Request, call_next):
        """Answer preflight directly, log everything else, add CORS headers."""
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        logger.info(f"{request.method} {request.url.path}")
        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response

    @app.exception_handler(StudentStoreError)
    async def store_error_handler(request: Request, exc: StudentStoreError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods share the plain fallback
        return PlainTextResponse("Not Found", status_code=404)

    app.state.storage = storage
    app.include_router(create_static_router(static_dir))

    @app.get("/students")
    async def list_students():
        """List every student in insertion order."""
        students = await asyncio.to_thread(storage.list_students)
        return JSONResponse(content=students)

    @app.post("/students")
    async def create_student(request: Request):
        """Create a student from the JSON body."""
        record = await read_json_body(request)

        if record is None:
            raise InvalidStudentError("Invalid JSON")
        if missing_fields(record):
            raise InvalidStudentError("Missing required fields")

        created = await asyncio.to_thread(storage.create_student, record)
        return JSONResponse(status_code=201, content=created)

    @app.put("/students/{student_id}")
    async def update_student(student_id: str, request: Request):
        """Merge the body's fields onto the student named in the path."""
        check_student_id(student_id)
        updates = update_fields(await read_json_body(request))
        merged = await asyncio.to_thread(storage.update_student, student_id, updates)
        return JSONResponse(content=merged)

    @app.delete("/students/{student_id}", response_model=MessageResponse)
    async def delete_student(student_id: str):
        """Delete the student named in the path."""
        check_student_id(student_id)
        await asyncio.to_thread(storage.delete_student, student_id)
        return MessageResponse(message="Student deleted successfully")

    return app
