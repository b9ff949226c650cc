import os
from functools import lru_cache


class Settings:
    """Application settings loaded from environment variables."""

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./radio_calico.db"
    )
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() in ("1", "true", "yes")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Station endpoints
    STREAM_URL: str = os.getenv(
        "STREAM_URL",
        "https://d3d4yli4hf5bmh.cloudfront.net/hls/live.m3u8"
    )
    METADATA_URL: str = os.getenv(
        "METADATA_URL",
        "https://d3d4yli4hf5bmh.cloudfront.net/metadatav2.json"
    )
    ALBUM_ART_URL: str = os.getenv(
        "ALBUM_ART_URL",
        "https://d3d4yli4hf5bmh.cloudfront.net/cover.jpg"
    )
    METADATA_TIMEOUT: float = float(os.getenv("METADATA_TIMEOUT", "5.0"))

    RECENT_USERS_LIMIT: int = int(os.getenv("RECENT_USERS_LIMIT", "10"))

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    # Sync URL for migrations
    @property
    def DATABASE_URL_SYNC(self) -> str:
        url = self.DATABASE_URL
        if "+aiosqlite" in url:
            return url.replace("+aiosqlite", "")
        return url.replace("+asyncpg", "")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
