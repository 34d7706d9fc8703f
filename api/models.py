"""Shared API request and response models for the EasyBooking API."""

from pydantic import BaseModel, Field


class CreatedResponse(BaseModel):
    """Identifier of a newly created hotel, serialized as ``_id``."""

    id: str = Field(serialization_alias="_id")


class MessageResponse(BaseModel):
    """Envelope for simple string responses."""

    message: str


class ErrorResponse(BaseModel):
    error: str
