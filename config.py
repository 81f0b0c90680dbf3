"""application settings loaded from the environment and .env"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """all fields can be overridden with the LISTVIEW_ prefix (e.g. LISTVIEW_API_TOKEN)"""

    model_config = SettingsConfigDict(
        env_prefix="LISTVIEW_",
        env_file=".env",
        extra="ignore",
    )

    API_ENDPOINT: str = "http://localhost:8080"
    API_TOKEN: str = ""
    API_VERSION: str = "v60.0"
    CATALOG_PATH: str = "/services/apexrest/objects"
    REQUEST_TIMEOUT: float = 30.0

    # host origin for canonical list view links, defaults to API_ENDPOINT
    INSTANCE_URL: str = ""

    SEARCH_PAUSE_MS: int = 200
    SEARCH_FILTER_MS: int = 400

    DEFAULT_ENTITY: str = "Contact"
    LOG_LEVEL: str = "INFO"

    @property
    def instance_origin(self) -> str:
        return (self.INSTANCE_URL or self.API_ENDPOINT).rstrip("/")


settings = Settings()
