import json
from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "data/bookstore.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # File Storage
    UPLOADS_DIR: str = "uploads"

    # Upload limits
    MAX_UPLOAD_SIZE_MB: int = 10
    MAX_IMAGE_WIDTH: int = 1000

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # JWT
    JWT_SECRET_KEY: str = "bookstore-development-secret-key-change-me"
    JWT_ISSUER: str = "bookstore-api"
    JWT_AUDIENCE: str = "bookstore-clients"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 5

    # Seed users and roles on startup
    SEED_DATA: bool = True
    SEED_PASSWORD: str = "P@ssword1"

    # Client
    API_BASE_URL: str = "http://localhost:8000"
    CLIENT_TOKEN_FILE: str = "~/.bookstore/token.json"
    CLIENT_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        extra = "allow"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Load JWT secret if provisioned as a key file
        jwt_key_file = Path("keys/jwt.json")
        if jwt_key_file.exists():
            with open(jwt_key_file) as f:
                data = json.load(f)
                self.JWT_SECRET_KEY = data.get("secret_key", self.JWT_SECRET_KEY)


settings = Settings()
