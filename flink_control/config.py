# flink_control/config.py
import tempfile
from pydantic import Field
from pydantic_settings import BaseSettings

from flink_control.models.client import ClientConfig

class Settings(BaseSettings):
    # ── Flink JobManager REST endpoint ──────────────────────────────────────────
    FLINK_URL: str = "http://localhost:8081"
    FLINK_REQUEST_TIMEOUT: float = Field(default=10.0, gt=0)

    # ── Defaults applied to every jar run unless overridden ─────────────────────
    FLINK_SAVEPOINT_PATH: str = "/home/flink/save"
    FLINK_DEFAULT_PARALLELISM: int = Field(default=1, ge=1)

    # ── Local scratch space for jars received through the API ───────────────────
    UPLOAD_TMP_DIR: str = tempfile.gettempdir()

    LOG_LEVEL: str = "INFO"

    def client_config(self) -> ClientConfig:
        return ClientConfig(
            base_url=self.FLINK_URL,
            timeout=self.FLINK_REQUEST_TIMEOUT,
            savepoint_path=self.FLINK_SAVEPOINT_PATH or None,
            default_parallelism=self.FLINK_DEFAULT_PARALLELISM,
        )

settings = Settings()
