"""Response models for the student records API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body returned by every JSON failure."""

    error: str


class MessageResponse(BaseModel):
    """Confirmation body."""

    message: str
