import os
from dataclasses import dataclass

@dataclass
class Settings:
    REST_MOUNT: str = os.getenv("REST_MOUNT", "/_r/")
    REST_MAX_AGE: int = int(os.getenv("REST_MAX_AGE", str(60 * 60)))  # 0 disables gc
    REGISTRY_API_BASE: str = os.getenv("REGISTRY_API_BASE", "http://localhost:5002")
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10"))
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", "5002"))

settings = Settings()
