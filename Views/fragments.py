"""HTML fragments for the listing pages, built from escaped pieces."""

from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode

from Users.user import SessionUser

from .renderer import SafeHtml, escape_html

CURRENCY = "₸"

SORT_CHOICES = (
    ("", "Default"),
    ("price_asc", "Price ↑"),
    ("price_desc", "Price ↓"),
    ("title_asc", "Title A→Z"),
    ("title_desc", "Title Z→A"),
)

LIST_QUERY_KEYS = ("q", "city", "minPrice", "maxPrice", "sort", "fields")

_CARD = """
      <div class="feature-card">
        <h3>{title}</h3>
        <p>{description}</p>
        <p>
          <strong>City:</strong> {location}<br/>
          <strong>Price:</strong> {price} {currency}<br/>
          <strong>Stars:</strong> {stars}<br/>
          <strong>Rooms:</strong> {rooms}<br/>
          <strong>Amenities:</strong> {amenities}<br/>
          <strong>Phone:</strong> {contact_phone}
        </p>
        <div class="card-actions">
          <a class="btn" href="/item/{id}">View</a>{actions}
        </div>
      </div>"""

_EDIT_ACTIONS = """
          <a class="btn btn-outline" href="/item/{id}/edit">Edit</a>
          <form method="POST" action="/item/{id}/delete" class="inline-form">
            <button class="btn btn-outline" type="submit" onclick="return confirm('Delete this hotel?')">Delete</button>
          </form>"""

EMPTY_RESULTS = '<div class="feature-card"><h3>No hotels found</h3></div>'


def listing_cards(documents: Iterable[Mapping[str, Any]], can_edit: bool) -> SafeHtml:
    """Result cards for ``/hotels``; projected documents render missing fields blank."""

    cards = []
    for doc in documents:
        listing_id = escape_html(doc.get("_id"))
        actions = _EDIT_ACTIONS.format(id=listing_id) if can_edit else ""
        cards.append(
            _CARD.format(
                id=listing_id,
                title=escape_html(doc.get("title")),
                description=escape_html(doc.get("description")),
                location=escape_html(doc.get("location")),
                price=escape_html(doc.get("price_per_night")),
                currency=CURRENCY,
                stars=escape_html(doc.get("stars")),
                rooms=escape_html(doc.get("rooms")),
                amenities=escape_html(doc.get("amenities")),
                contact_phone=escape_html(doc.get("contact_phone")),
                actions=actions,
            )
        )
    return SafeHtml("".join(cards) if cards else EMPTY_RESULTS)


def _option(value: str, label: str, selected: bool) -> str:
    marker = " selected" if selected else ""
    return f'<option value="{escape_html(value)}"{marker}>{escape_html(label)}</option>'


def city_options(cities: Iterable[str], selected: str) -> SafeHtml:
    options = [_option("", "All", False)]
    options.extend(_option(city, city, city == selected) for city in cities)
    return SafeHtml("".join(options))


def sort_options(selected: str) -> SafeHtml:
    return SafeHtml("".join(_option(value, label, value == selected) for value, label in SORT_CHOICES))


def auth_controls(user: Optional[SessionUser], auth_enabled: bool) -> SafeHtml:
    if not auth_enabled:
        return SafeHtml("")
    if user is None:
        return SafeHtml('<a class="btn" href="/login">Login</a>')
    return SafeHtml(
        '<form method="POST" action="/logout" class="logout-form">'
        f'<button class="btn btn-outline" type="submit">Logout ({escape_html(user.username)})</button>'
        "</form>"
    )


def api_url(params: Mapping[str, Any]) -> str:
    """Equivalent ``/api/hotels`` URL for the current list query."""

    query = urlencode({key: params.get(key) or "" for key in LIST_QUERY_KEYS})
    return f"/api/hotels?{query}"


def price_label(price: Any) -> str:
    return f"{price} {CURRENCY} / night"
