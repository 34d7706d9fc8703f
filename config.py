'''
Runtime configuration for the EasyBooking application.

Values are read from the process environment, optionally seeded from a
``.env`` file in the working directory.
'''
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

SESSION_MAX_AGE_SECONDS = 60 * 60 * 6
SESSION_COOKIE_NAME = "sid"


class Settings(BaseModel):
    """Environment driven settings with documented defaults."""

    mongo_uri: str = "mongodb://localhost:27017"
    db_name: str = "easybooking"
    session_secret: str = "dev_secret_change_me"
    admin_password: str = "admin12345"
    port: int = Field(default=3000, ge=1, le=65535)
    app_env: str = "development"
    auth_enabled: bool = True
    log_level: str = "INFO"
    session_max_age: int = SESSION_MAX_AGE_SECONDS

    @property
    def production(self) -> bool:
        return self.app_env.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Recognized variables: MONGO_URI, DB_NAME, SESSION_SECRET,
        ADMIN_PASSWORD, PORT, APP_ENV, AUTH_ENABLED, LOG_LEVEL.

        Returns:
            Settings: populated instance, defaults applied for missing values.
        """
        load_dotenv()
        values: dict[str, object] = {}
        for field_name, env_name in (
            ("mongo_uri", "MONGO_URI"),
            ("db_name", "DB_NAME"),
            ("session_secret", "SESSION_SECRET"),
            ("admin_password", "ADMIN_PASSWORD"),
            ("port", "PORT"),
            ("app_env", "APP_ENV"),
            ("log_level", "LOG_LEVEL"),
            ("auth_enabled", "AUTH_ENABLED"),
        ):
            raw = os.environ.get(env_name, "").strip()
            if raw:
                values[field_name] = raw
        return cls(**values)
