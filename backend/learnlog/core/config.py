from typing import Dict, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "LearnLog API"
    API_PREFIX: str = "/api"

    # Record store: "local" (SQLite) or "supabase" (hosted)
    STORE_BACKEND: str = "local"

    # Local store
    DATABASE_URL: str = "sqlite:///./data/learnlog.db"
    LOCAL_API_TOKENS: Dict[str, str] = {}  # bearer token -> user id

    # Hosted backend
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    AUDIO_BUCKET: str = "audio-recordings"
    REQUEST_TIMEOUT: float = 30.0

    SAMPLE_CSV_URL: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
