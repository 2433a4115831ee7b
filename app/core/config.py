from pathlib import Path
# Use BaseSettings for environment variable loading
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os
import logging

logger = logging.getLogger(__name__)

# Define a base directory using environment variable or default
# This allows flexibility in deployment (e.g., in containers)
PROJECT_ROOT_ENV = os.getenv("PROJECT_ROOT")
BASE_DIR = Path(PROJECT_ROOT_ENV).resolve() if PROJECT_ROOT_ENV else Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """Application Configuration using Pydantic BaseSettings."""
    # Load from .env file first, then environment variables. Ignore extras.
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # --- Base Paths ---
    APP_DIR: Path = BASE_DIR / "app"
    STATIC_DIR: Path = APP_DIR / "static"
    TEMPLATES_DIR: Path = APP_DIR / "templates"

    # --- Upstream Provider ---
    # Absence is a deployment defect, reported per request as a 500
    PEXELS_API_KEY: Optional[str] = None
    PEXELS_API_URL: str = "https://api.pexels.com/v1"
    PEXELS_TIMEOUT_SECONDS: float = 15.0

    # --- API Query Defaults ---
    DEFAULT_PER_PAGE: int = 15
    MAX_PER_PAGE: int = 80 # Pexels max is 80

    # --- API Configuration ---
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    # ALLOWED_HOSTS should be set restrictively in production via env var
    # Example: ALLOWED_HOSTS='["https://yourdomain.com", "https://www.yourdomain.com"]'
    ALLOWED_HOSTS: List[str] = ["*"] # Default allows all, CHANGE FOR PROD
    LOG_LEVEL: str = "INFO"

    # --- Dynamic Attributes (Set after loading) ---
    BASE_URL: str = ""       # Initialize default

    # Pydantic v2 way to run logic after validation/loading
    def __init__(self, **values):
        super().__init__(**values)
        # Set Base URL
        self.BASE_URL = f"http://{self.API_HOST}:{self.API_PORT}"

    @property
    def credential_configured(self) -> bool:
        return bool(self.PEXELS_API_KEY and self.PEXELS_API_KEY.strip())

# Instantiate settings - This single instance will be imported elsewhere
settings = Settings()

def check_configuration(config: Settings = settings) -> bool:
    """Log the state of required configuration at startup. Returns True when usable."""
    logger.info("Checking configuration...")
    if not config.credential_configured:
        logger.error("PEXELS_API_KEY environment variable is not set; /api/images will respond with 500")
        return False
    for dir_path in (config.STATIC_DIR, config.TEMPLATES_DIR):
        if not dir_path.is_dir():
            logger.warning(f"Configured directory does not exist: {dir_path}")
    logger.info(f"Upstream provider: {config.PEXELS_API_URL} (timeout {config.PEXELS_TIMEOUT_SECONDS}s)")
    return True
