from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Trip Scan Engine"
    LOG_LEVEL: str = "DEBUG"
    ENVIRONMENT: str = "development"

    # Geocoding
    GEOCODER_TYPE: str = "nominatim"  # nominatim, static
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"
    GEOCODER_USER_AGENT: str = "trip-scan-engine/1.0"
    GEOCODE_RATE_LIMIT_PER_MINUTE: int = 30
    GEOCODE_MAX_WAIT_SECONDS: float = 15.0
    GEOCODE_TIMEOUT_SECONDS: float = 10.0
    GEOCODE_KEY_DECIMALS: int = 3

    # Logs every Day→Trip merge decision
    TRIP_CLUSTERING_DEBUG: bool = False

    class Config:
        env_file = ".env"

configs = Settings()
