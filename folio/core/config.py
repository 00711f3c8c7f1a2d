from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "Folio API"
    DATABASE_URL: str = "sqlite:///./folio.db"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Bearer tokens are minted by the identity service with a shared secret
    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"

    # AWS S3 (or any S3-compatible store via S3_ENDPOINT_URL)
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"
    S3_BUCKET: str = "folio-media"
    S3_ENDPOINT_URL: Optional[str] = None

    # Media
    MEDIA_MAX_SIZE: int = 5 * 1024 * 1024  # 5MB
    MEDIA_ALLOWED_TYPES: List[str] = Field(default=[
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/gif",
        "image/svg+xml",
    ])
    MEDIA_DEFAULT_FOLDER: str = "blog-images"
    MEDIA_COVER_FOLDER: str = "blog-covers"

    # Blog
    DEFAULT_TAG_COLOR: str = "#3B82F6"
    SLUG_RETRY_LIMIT: int = 5

    @property
    def S3_BASE_URL(self) -> str:
        if self.S3_ENDPOINT_URL:
            return f"{self.S3_ENDPOINT_URL.rstrip('/')}/{self.S3_BUCKET}"
        return f"https://{self.S3_BUCKET}.s3.{self.AWS_REGION}.amazonaws.com"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
