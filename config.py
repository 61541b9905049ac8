from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    STRIPE_SECRET_KEY: str = ""
    PORT: int = 5000
    CHECKOUT_CURRENCY: str = "inr"
    DEFAULT_SUCCESS_URL: str = "https://example.com/success"
    DEFAULT_CANCEL_URL: str = "https://example.com/cancel"
    CLIENT_BUILD_DIR: Optional[str] = None

    @property
    def payments_enabled(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    def client_build_path(self) -> Optional[Path]:
        """First existing client bundle directory, or None."""
        if self.CLIENT_BUILD_DIR:
            candidates = [Path(self.CLIENT_BUILD_DIR)]
        else:
            candidates = [BASE_DIR / "client" / "dist", BASE_DIR / "client" / "build"]
        for path in candidates:
            if path.is_dir():
                return path
        return None


@lru_cache
def get_settings() -> Settings:
    return Settings()
