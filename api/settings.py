from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리의 .env를 사용
PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

load_dotenv(ENV_FILE, override=True)


class Settings(BaseSettings):
    """backend/frontend 공통 설정을 환경변수와 .env로부터 읽음"""

    # Database
    db_host: str = Field("localhost", validation_alias="DB_HOST")
    db_user: str = Field("dashboard", validation_alias="DB_USER")
    db_password: str = Field("dashboard", validation_alias="DB_PASSWORD")
    db_name: str = Field("dashboarddb", validation_alias="DB_NAME")
    # 전체 connection string이 주어지면 위 값들보다 우선한다
    database_url_override: Optional[str] = Field(None, validation_alias="DATABASE_URL")

    # Frontend -> API
    api_base_url: str = Field("http://localhost:8080", validation_alias="API_BASE_URL")

    # Logging
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    json_logs: bool = Field(False, validation_alias="JSON_LOGS")

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def async_database_url(self) -> str:
        """Return async SQLAlchemy URL (using aiomysql driver)."""
        if self.database_url_override:
            return self.database_url_override
        return f"mysql+aiomysql://{self.db_user}:{self.db_password}@{self.db_host}/{self.db_name}"


@lru_cache()
def get_settings() -> Settings:
    """프로세스 당 한 번만 설정을 읽는다."""
    return Settings()
