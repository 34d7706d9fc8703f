'''
FastAPI dependencies exposing the objects built at startup.
'''
from fastapi import Request

from config import Settings

from .db import BookingDB


def get_db(request: Request) -> BookingDB:
    """Store client created in the application lifespan."""
    return request.app.state.db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
