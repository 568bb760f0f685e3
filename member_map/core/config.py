import secrets
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Member Map"
    PROJECT_DESCRIPTION: str = "Shared map of member locations and points of interest"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # JWT Settings
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Database Settings
    DATABASE_URL: str = "sqlite:///./member_map.db"

    # Map Settings
    MAP_ENABLED: bool = True
    POI_ENABLED: bool = True
    POI_CATEGORY_ID: Optional[int] = None

    # Nominatim reverse geocoding
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/reverse"
    GEOCODER_USER_AGENT: str = "MemberMap Backend"
    GEOCODER_ACCEPT_LANGUAGE: str = "de,en"
    GEOCODER_TIMEOUT: float = 5.0

    # Outbound location sync to the second forum
    LOCATION_SYNC_ENABLED: bool = False
    LOCATION_SYNC_URL: str = ""
    LOCATION_SYNC_SECRET: str = ""
    LOCATION_SYNC_ATTEMPTS: int = 3

    class ConfigDict:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
