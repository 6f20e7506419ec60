# app/config.py
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    env: Literal["dev", "stage", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    sql_echo: bool = False
    auto_init_db: bool = True

    # Prototype auth: the first user with this role is treated as logged in
    demo_user_role: str = "school-administrator"

    # Object storage settings (S3-compatible: AWS, Supabase, R2, MinIO)
    storage_bucket_name: str = "team-avatars"
    storage_region: str = "us-east-1"
    storage_endpoint_url: Optional[str] = None
    storage_access_key_id: Optional[str] = None
    storage_secret_access_key: Optional[str] = None
    storage_public_url_base: Optional[str] = None
    storage_upload_acl: Optional[str] = None
    storage_local: bool = False  # True = local filesystem (dev only)

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
