"""Server rendered HTML pages for browsing and managing hotel listings."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from config import Settings
from Database.db import BookingDB
from Database.deps import get_db, get_settings
from Hotels import service
from Hotels.structure import Listing
from Views import fragments
from Views.renderer import SafeHtml, render_view

from .auth import can_edit, current_user, require_user
from .utils import _parse_id as _parse_hotel_id

logger = logging.getLogger(__name__)

HOTEL = "hotel"

page_router = APIRouter()


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def _static_page(name: str) -> HTMLResponse:
    return HTMLResponse(render_view(name, {}))


@page_router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return _static_page("index.html")


@page_router.get("/about", response_class=HTMLResponse)
async def about() -> HTMLResponse:
    return _static_page("about.html")


@page_router.get("/contact", response_class=HTMLResponse)
async def contact() -> HTMLResponse:
    return _static_page("contact.html")


@page_router.get("/search")
async def search(q: str = "") -> RedirectResponse:
    return _redirect(f"/hotels?q={quote(q, safe='')}")


@page_router.get("/hotels", response_class=HTMLResponse)
async def hotels_page(
    request: Request,
    db: BookingDB = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Filterable, sortable list of hotels with a link to the same query on the API."""

    params = request.query_params
    documents = await service.list_listings(db, params)
    cities = await service.list_cities(db)

    results = fragments.auth_controls(current_user(request), settings.auth_enabled)
    results += fragments.listing_cards(documents, can_edit(request))

    return HTMLResponse(
        render_view(
            "hotels.html",
            {
                "q": params.get("q", ""),
                "city_options": fragments.city_options(cities, params.get("city", "")),
                "min_price": params.get("minPrice", ""),
                "max_price": params.get("maxPrice", ""),
                "sort_options": fragments.sort_options(params.get("sort", "")),
                "sort": params.get("sort", ""),
                "fields": params.get("fields", ""),
                "api_url": fragments.api_url(params),
                "results": SafeHtml(results),
            },
        )
    )


@page_router.get("/hotels/new", response_class=HTMLResponse, dependencies=[Depends(require_user)])
async def new_hotel_page() -> HTMLResponse:
    return _static_page("new-hotel.html")


@page_router.post("/hotels", dependencies=[Depends(require_user)])
async def create_hotel(request: Request, db: BookingDB = Depends(get_db)) -> Response:
    form = await request.form()
    listing_id = await service.create_listing(db, form)
    return _redirect(f"/item/{listing_id}")


@page_router.get("/item/{hotel_id}", response_class=HTMLResponse)
async def item_page(hotel_id: str, db: BookingDB = Depends(get_db)) -> HTMLResponse:
    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    listing = Listing.from_document(await service.get_listing(db, guid))
    return HTMLResponse(
        render_view(
            "item.html",
            {
                "id": listing.id,
                "title": listing.title,
                "description": listing.description,
                "location": listing.location,
                "availability": "Available",
                "price": fragments.price_label(listing.price_per_night),
                "stars": listing.stars,
                "rooms": listing.rooms,
                "amenities": listing.amenities,
                "contact_phone": listing.contact_phone,
            },
        )
    )


@page_router.get(
    "/item/{hotel_id}/edit", response_class=HTMLResponse, dependencies=[Depends(require_user)]
)
async def edit_hotel_page(hotel_id: str, db: BookingDB = Depends(get_db)) -> HTMLResponse:
    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    listing = Listing.from_document(await service.get_listing(db, guid))
    return HTMLResponse(
        render_view(
            "edit-hotel.html",
            {
                "id": listing.id,
                **listing.to_document(),
            },
        )
    )


@page_router.post("/item/{hotel_id}", dependencies=[Depends(require_user)])
async def update_hotel(hotel_id: str, request: Request, db: BookingDB = Depends(get_db)) -> Response:
    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    form = await request.form()
    await service.update_listing(db, guid, form)
    return _redirect(f"/item/{guid}")


@page_router.post("/item/{hotel_id}/delete", dependencies=[Depends(require_user)])
async def delete_hotel(hotel_id: str, db: BookingDB = Depends(get_db)) -> Response:
    guid = _parse_hotel_id(hotel_id, logger, HOTEL)
    await service.delete_listing(db, guid)
    return _redirect("/hotels")
