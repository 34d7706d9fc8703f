"""Hotel listing JSON API routes, mounted under ``/api/hotels``."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status

from Database.db import BookingDB
from Database.deps import get_db
from errors import ValidationError
from Hotels import service
from Hotels.structure import serialize_document

from .auth import require_user
from .models import CreatedResponse, ErrorResponse, MessageResponse
from .utils import _parse_id as _parse_hotel_id

logger = logging.getLogger(__name__)

HOTEL = "hotel"

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}
PROTECTED_RESPONSES: dict[int | str, dict[str, Any]] = {
    **ERROR_RESPONSES,
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
}

# mount api router
hotel_router = APIRouter()


async def _read_payload(request: Request) -> dict[str, Any]:
    """Decode a JSON object body; read only after the session gate has passed."""

    try:
        payload = await request.json()
    except ValueError as exc:
        logger.info("Malformed JSON body", extra={"path": request.url.path})
        raise ValidationError() from exc
    if not isinstance(payload, dict):
        raise ValidationError()
    return payload


@hotel_router.get("", status_code=status.HTTP_200_OK)
async def list_hotels(request: Request, db: BookingDB = Depends(get_db)) -> list[dict[str, Any]]:
    """
    List hotels filtered by ``q``, ``city``, ``minPrice``, ``maxPrice``,
    ordered by ``sort`` and projected by ``fields``.
    """

    documents = await service.list_listings(db, request.query_params)
    return [serialize_document(document) for document in documents]


@hotel_router.get("/{hotel_id}", status_code=status.HTTP_200_OK, responses=ERROR_RESPONSES)
async def get_hotel(hotel_id: str, request: Request, db: BookingDB = Depends(get_db)) -> dict[str, Any]:
    """
    Retrieve a single hotel by identifier.

    Args:
        hotel_id: ObjectId of the target hotel (path parameter).
        request: incoming request; its ``fields`` parameter projects the result.
        db: store client injected via dependency.
    """

    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    document = await service.get_listing(db, guid, request.query_params)
    logger.info("Hotel retrieved", extra={"hotel_id": hotel_id})
    return serialize_document(document)


@hotel_router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=PROTECTED_RESPONSES,
    dependencies=[Depends(require_user)],
)
async def create_hotel(request: Request, db: BookingDB = Depends(get_db)) -> CreatedResponse:
    """
    Add a hotel after validating every field.

    Returns:
        CreatedResponse: ``{"_id": ...}`` of the new hotel.
    """

    listing_id = await service.create_listing(db, await _read_payload(request))
    return CreatedResponse(id=str(listing_id))


@hotel_router.put(
    "/{hotel_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    responses=PROTECTED_RESPONSES,
    dependencies=[Depends(require_user)],
)
async def update_hotel(
    hotel_id: str, request: Request, db: BookingDB = Depends(get_db)
) -> MessageResponse:
    """
    Replace all mutable fields of an existing hotel.

    The body is validated exactly like a create request.
    """

    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    await service.update_listing(db, guid, await _read_payload(request))
    return MessageResponse(message="Updated")


@hotel_router.delete(
    "/{hotel_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    responses=PROTECTED_RESPONSES,
    dependencies=[Depends(require_user)],
)
async def delete_hotel(hotel_id: str, db: BookingDB = Depends(get_db)) -> MessageResponse:
    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    await service.delete_listing(db, guid)
    return MessageResponse(message="Deleted")
