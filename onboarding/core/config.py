from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Required: the service refuses to start without these
    database_url: str = Field(..., env="DATABASE_URL")
    jwt_secret: str = Field(..., env="JWT_SECRET")

    # Application Configuration
    app_env: str = Field(default="dev", env="APP_ENV")
    access_token_expires: int = Field(default=900, env="ACCESS_TOKEN_EXPIRES")  # 15 minutes
    refresh_token_expires: int = Field(default=604800, env="REFRESH_TOKEN_EXPIRES")  # 7 days

    # Object storage
    storage_root: str = Field(default="media", env="STORAGE_ROOT")
    signed_url_expires: int = Field(default=3600, env="SIGNED_URL_EXPIRES")  # 1 hour

    # Onboarding rules
    required_document_types: List[str] = Field(
        default=[
            "pan_card",
            "aadhar_card",
            "tenth_certificate",
            "twelfth_certificate",
            "bachelors_degree",
        ],
        env="REQUIRED_DOCUMENT_TYPES",
    )
    admin_page_size: int = Field(default=10, env="ADMIN_PAGE_SIZE")

    # CORS - allow frontend origins (filter out None values)
    allowed_origins: List[str] = [
        origin for origin in [
            "http://localhost:3000",
            "http://localhost:5173",  # Vite dev server
            os.getenv("FRONTEND_URL")
        ] if origin is not None
    ]

    @field_validator("database_url", "jwt_secret")
    @classmethod
    def must_not_be_blank(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(
                f"{info.field_name.upper()} is not set. "
                "Add it to the environment or to the .env file in the project root."
            )
        return v.strip()

    @field_validator("database_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
