'''
One-time startup provisioning: the admin account and the demo hotel listings.
'''
import logging
from typing import Any

from pymongo.errors import DuplicateKeyError

from Hotels.structure import ListingFields
from Users.user import ADMIN_ROLE, ADMIN_USERNAME, User, hash_password
from utils import utc_now

from .db import USERS_COLLECTION, BookingDB

logger = logging.getLogger(__name__)

SEED_HOTELS: tuple[dict[str, Any], ...] = (
    {"title": "Luxury Hotel Room", "description": "Premium room with city view", "location": "Almaty", "price_per_night": 70000, "stars": 5, "rooms": 40, "amenities": "WiFi, Breakfast, Spa, Gym", "contact_phone": "+7 700 111 22 33"},
    {"title": "Cozy Apartment", "description": "2-bedroom apartment near center", "location": "Astana", "price_per_night": 55000, "stars": 4, "rooms": 12, "amenities": "WiFi, Kitchen, Parking", "contact_phone": "+7 701 222 33 44"},
    {"title": "Beach Resort", "description": "All-inclusive resort near beach", "location": "Aktau", "price_per_night": 120000, "stars": 5, "rooms": 90, "amenities": "Pool, Beach, WiFi, All-inclusive", "contact_phone": "+7 702 333 44 55"},
    {"title": "Business Hotel", "description": "Comfort stay for business trips", "location": "Astana", "price_per_night": 65000, "stars": 4, "rooms": 60, "amenities": "WiFi, Breakfast, Conference hall", "contact_phone": "+7 703 444 55 66"},
    {"title": "Family Apartment", "description": "Spacious apartment for families", "location": "Almaty", "price_per_night": 60000, "stars": 4, "rooms": 18, "amenities": "WiFi, Kitchen, Washer", "contact_phone": "+7 704 555 66 77"},
    {"title": "Mountain Lodge", "description": "Quiet lodge near mountains", "location": "Almaty", "price_per_night": 80000, "stars": 5, "rooms": 25, "amenities": "WiFi, Sauna, Fireplace", "contact_phone": "+7 705 111 11 11"},
    {"title": "City Hostel", "description": "Budget hostel in downtown", "location": "Astana", "price_per_night": 18000, "stars": 2, "rooms": 30, "amenities": "WiFi, Shared kitchen", "contact_phone": "+7 705 222 22 22"},
    {"title": "Lake House", "description": "House near lake with terrace", "location": "Burabay", "price_per_night": 90000, "stars": 5, "rooms": 10, "amenities": "WiFi, BBQ, Lake view", "contact_phone": "+7 705 333 33 33"},
    {"title": "Boutique Hotel", "description": "Stylish boutique rooms", "location": "Shymkent", "price_per_night": 50000, "stars": 4, "rooms": 22, "amenities": "WiFi, Breakfast, Cafe", "contact_phone": "+7 705 444 44 44"},
    {"title": "Airport Inn", "description": "Close to airport, quick stay", "location": "Almaty", "price_per_night": 35000, "stars": 3, "rooms": 45, "amenities": "WiFi, Shuttle, Breakfast", "contact_phone": "+7 705 555 55 55"},
    {"title": "Central Suites", "description": "Suites in city center", "location": "Astana", "price_per_night": 75000, "stars": 5, "rooms": 35, "amenities": "WiFi, Gym, Parking", "contact_phone": "+7 706 111 22 33"},
    {"title": "Old Town Hotel", "description": "Classic hotel near old town", "location": "Turkistan", "price_per_night": 42000, "stars": 3, "rooms": 28, "amenities": "WiFi, Breakfast", "contact_phone": "+7 706 222 33 44"},
    {"title": "Riverside Apartment", "description": "Apartment near river walk", "location": "Pavlodar", "price_per_night": 38000, "stars": 3, "rooms": 14, "amenities": "WiFi, Kitchen", "contact_phone": "+7 706 333 44 55"},
    {"title": "Steppe Hotel", "description": "Simple comfortable rooms", "location": "Karaganda", "price_per_night": 32000, "stars": 3, "rooms": 50, "amenities": "WiFi, Parking", "contact_phone": "+7 706 444 55 66"},
    {"title": "Green Park Resort", "description": "Nature resort with park", "location": "Kokshetau", "price_per_night": 85000, "stars": 5, "rooms": 55, "amenities": "Pool, WiFi, Spa", "contact_phone": "+7 706 555 66 77"},
    {"title": "Budget Stay", "description": "Good for short trips", "location": "Aktobe", "price_per_night": 25000, "stars": 2, "rooms": 35, "amenities": "WiFi", "contact_phone": "+7 707 111 00 11"},
    {"title": "Premium Suites", "description": "Premium suites with services", "location": "Almaty", "price_per_night": 140000, "stars": 5, "rooms": 20, "amenities": "WiFi, Spa, Butler", "contact_phone": "+7 707 222 00 22"},
    {"title": "Family Resort", "description": "Resort for families & kids", "location": "Aktau", "price_per_night": 110000, "stars": 4, "rooms": 75, "amenities": "Kids zone, Pool, WiFi", "contact_phone": "+7 707 333 00 33"},
    {"title": "Student Rooms", "description": "Affordable rooms near uni", "location": "Almaty", "price_per_night": 20000, "stars": 2, "rooms": 80, "amenities": "WiFi, Shared kitchen", "contact_phone": "+7 707 444 00 44"},
    {"title": "Conference Hotel", "description": "Hotel with conference center", "location": "Astana", "price_per_night": 95000, "stars": 5, "rooms": 120, "amenities": "WiFi, Conference halls, Breakfast", "contact_phone": "+7 707 555 00 55"},
)


def ensure_admin_user(db: BookingDB, password: str) -> bool:
    """
    Create the ``admin`` account when it does not exist yet.

    Args:
        db: connected store client.
        password: plain text password for a newly created admin.

    Returns:
        bool: True if the account was created by this call.
    """

    users = db.database[USERS_COLLECTION]
    if users.find_one({"username": ADMIN_USERNAME}) is not None:
        return False

    admin = User(username=ADMIN_USERNAME, password_hash=hash_password(password), role=ADMIN_ROLE)
    try:
        users.insert_one(admin.to_document())
    except DuplicateKeyError:
        logger.info("Admin user created concurrently; skipping")
        return False
    logger.info("Admin user created", extra={"username": ADMIN_USERNAME})
    return True


def seed_hotels(db: BookingDB) -> int:
    """Insert the demo listings if the hotels collection is empty; returns the count inserted."""

    if db.count_listings() > 0:
        return 0
    created_at = utc_now()
    documents = [
        {**ListingFields.model_validate(item).to_document(), "created_at": created_at}
        for item in SEED_HOTELS
    ]
    inserted = db.insert_listings(documents)
    logger.info("Hotels seeded", extra={"count": inserted})
    return inserted


def provision(db: BookingDB, admin_password: str) -> None:
    '''Connect, then ensure the admin account and seed data, in that order.'''
    db.connect()
    ensure_admin_user(db, admin_password)
    seed_hotels(db)
