from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Provider credentials (presence enables the provider)
    GOOGLE_PLACES_API_KEY: str | None = None
    GOOGLE_MAPS_API_KEY: str | None = None  # rendering-only key handed to the browser
    APIFY_API_TOKEN: str | None = None
    MEETUP_API_KEY: str | None = None
    FACEBOOK_ACCESS_TOKEN: str | None = None
    PREDICTHQ_API_TOKEN: str | None = None
    TICKETMASTER_API_KEY: str | None = None
    HUNTER_IO_API_KEY: str | None = None

    # Logging
    LOG_LEVEL: str = "INFO"
    SLACK_WEBHOOK_URL: str | None = None

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 15.0
    NOMINATIM_USER_AGENT: str = "LeaseBoost/1.0"  # Nominatim usage policy requires one

    # Events
    EVENTS_RESULT_LIMIT: int = 20
    APIFY_POLL_INTERVAL_SECONDS: float = 1.0
    APIFY_MAX_POLL_ATTEMPTS: int = 30

    # Nearby businesses
    NEARBY_RADIUS_METERS: int = 1000
    NEARBY_RESULTS_PER_CATEGORY: int = 2

    # Enrichment
    ENRICH_DEFAULT_LIMIT: int = 2

    # Docs Configuration
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development

    @property
    def enabled_providers(self) -> List[str]:
        """Names of the upstream integrations that have credentials configured."""
        flags = {
            "apify_meetup": bool(self.APIFY_API_TOKEN and self.GOOGLE_PLACES_API_KEY),
            "meetup": bool(self.MEETUP_API_KEY),
            "facebook": bool(self.FACEBOOK_ACCESS_TOKEN),
            "predicthq": bool(self.PREDICTHQ_API_TOKEN),
            "ticketmaster": bool(self.TICKETMASTER_API_KEY),
            "google_places": bool(self.GOOGLE_PLACES_API_KEY),
            "hunter": bool(self.HUNTER_IO_API_KEY),
        }
        return [name for name, enabled in flags.items() if enabled]


settings = Settings()
