# flink_control/models/client.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str
    timeout: float = Field(default=10.0, gt=0)  # seconds, applied to every request
    savepoint_path: Optional[str] = None        # default restore path for runs
    default_parallelism: int = Field(default=1, ge=1)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("base_url must not be empty")
        return value.rstrip("/")
