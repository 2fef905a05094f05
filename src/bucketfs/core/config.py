"""Configuration management for bucketfs."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "bucketfs"

    # S3 caps both listing pages and multi-object deletes at 1000 keys
    list_page_size: int = 1000
    max_delete_batch_size: int = 1000

    model_config = {
        "env_prefix": "BUCKETFS_",
        "case_sensitive": False,
    }


settings = Settings()
