"""
Listing operations shared by the HTML pages and the JSON API.

Every mutating operation validates its input before the store is touched, and
each store call is a single atomic document operation.
"""

import logging
from typing import Any, Mapping, Optional

from bson import ObjectId
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from Database.db import BookingDB
from errors import AppError, NotFoundError, ValidationError
from utils import utc_now

from .query import build_filter, build_projection, build_sort
from .structure import ListingFields

logger = logging.getLogger(__name__)


def validate_listing(data: Mapping[str, Any]) -> ListingFields:
    """
    Validate a create/update payload.

    Args:
        data: form or JSON fields.

    Returns:
        ListingFields: coerced, validated fields.

    Raises:
        ValidationError: naming the offending fields.
    """

    try:
        return ListingFields.model_validate(dict(data))
    except PydanticValidationError as exc:
        invalid = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
        logger.info("Rejected listing payload", extra={"invalid_fields": invalid})
        raise ValidationError(
            f"Missing/invalid fields: {', '.join(invalid)}", context={"fields": invalid}
        ) from exc


async def list_listings(db: BookingDB, params: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Filter, sort and project listings according to the query parameters."""

    predicate = build_filter(params)
    sort = build_sort(params)
    projection = build_projection(params)
    try:
        return await run_in_threadpool(db.find_listings, predicate, sort, projection)
    except PyMongoError as exc:
        logger.exception("Failed to list hotels")
        raise AppError("Unable to list hotels due to an internal error.") from exc


async def list_cities(db: BookingDB) -> list[str]:
    try:
        return await run_in_threadpool(db.distinct_locations)
    except PyMongoError as exc:
        logger.exception("Failed to list hotel cities")
        raise AppError("Unable to list hotels due to an internal error.") from exc


async def get_listing(
    db: BookingDB, listing_id: ObjectId, params: Optional[Mapping[str, Any]] = None
) -> dict[str, Any]:
    """
    Retrieve a single listing, optionally projected by ``fields``.

    Raises:
        NotFoundError: when no listing has this identifier.
    """

    projection = build_projection(params or {})
    try:
        document = await run_in_threadpool(db.find_listing, listing_id, projection)
    except PyMongoError as exc:
        logger.exception("Failed to fetch hotel", extra={"listing_id": str(listing_id)})
        raise AppError("Unable to retrieve hotel due to an internal error.") from exc

    if document is None:
        raise NotFoundError(context={"listing_id": str(listing_id)})
    return document


async def create_listing(db: BookingDB, data: Mapping[str, Any]) -> ObjectId:
    fields = validate_listing(data)
    document = {**fields.to_document(), "created_at": utc_now()}
    try:
        listing_id = await run_in_threadpool(db.insert_listing, document)
    except PyMongoError as exc:
        logger.exception("Failed to insert hotel", extra={"title": fields.title})
        raise AppError("Unable to create hotel due to an internal error.") from exc

    logger.info("Hotel created", extra={"listing_id": str(listing_id)})
    return listing_id


async def update_listing(db: BookingDB, listing_id: ObjectId, data: Mapping[str, Any]) -> None:
    """
    Replace every mutable field of a listing with freshly validated values.

    Raises:
        ValidationError: before any store call when the payload is invalid.
        NotFoundError: when no listing has this identifier.
    """

    fields = validate_listing(data)
    try:
        matched = await run_in_threadpool(db.replace_listing_fields, listing_id, fields.to_document())
    except PyMongoError as exc:
        logger.exception("Failed to update hotel", extra={"listing_id": str(listing_id)})
        raise AppError("Unable to update hotel due to an internal error.") from exc

    if not matched:
        raise NotFoundError(context={"listing_id": str(listing_id)})
    logger.info("Hotel updated", extra={"listing_id": str(listing_id)})


async def delete_listing(db: BookingDB, listing_id: ObjectId) -> None:
    try:
        deleted = await run_in_threadpool(db.delete_listing, listing_id)
    except PyMongoError as exc:
        logger.exception("Unable to delete hotel", extra={"listing_id": str(listing_id)})
        raise AppError("Unable to delete hotel due to an internal error.") from exc

    if not deleted:
        raise NotFoundError(context={"listing_id": str(listing_id)})
    logger.info("Hotel deleted", extra={"listing_id": str(listing_id)})
