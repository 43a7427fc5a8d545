from typing import List, Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "local"
    STORE_NAME: str = "LinkWedding"
    BASE_URL: str = "http://localhost:3000"

    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "linkwedding"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"
    DATABASE_URL: Optional[str] = None

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    INVOICE_TOKEN_EXPIRE_MINUTES: int = 720

    PAYMENT_WINDOW_HOURS: int = 24
    INVOICE_NUMBER_ATTEMPTS: int = 5
    PROOF_UPDATE_ATTEMPTS: int = 3
    ORDERS_PAGE_SIZE: int = 10

    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_BUCKET_NAME: str = ""
    R2_PUBLIC_BASE: str = ""

    BREVO_API_KEY: str = ""
    MAIL_FROM: str = "noreply@linkwedding.id"
    ADMIN_EMAILS: List[str] = []

    META_PIXEL_ID: str = ""
    META_ACCESS_TOKEN: str = ""

    ADMIN_WHATSAPP: str = ""

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL

        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"


settings = Settings()
