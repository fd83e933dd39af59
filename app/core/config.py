from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

# Used when AUTH_SECRET is unset. Anyone who reads this file can write posts,
# so production deployments must override it.
INSECURE_DEFAULT_SECRET = "my-secret-password"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Lumina Blog"
    API_PREFIX: str = "/api"

    # Table store
    DATABASE_URL: str = "sqlite:///./lumina.db"

    # Shared bearer secret for mutating endpoints
    AUTH_SECRET: str = ""

    # Object store (S3-compatible, e.g. Cloudflare R2)
    STORAGE_BACKEND: str = "s3"  # "s3" or "memory"
    R2_BUCKET: str = ""
    R2_ENDPOINT_URL: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_PUBLIC_DOMAIN: str = ""  # Public base URL for served assets

    # Client gateway default target
    API_BASE_URL: str = "https://lumina-blog-backend.workers.dev"

    # Render logs as JSON (production) instead of console output
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    @property
    def auth_secret(self) -> str:
        return self.AUTH_SECRET or INSECURE_DEFAULT_SECRET

    @property
    def using_default_secret(self) -> bool:
        return not self.AUTH_SECRET


settings = Settings()
