# flink_control/models/jar.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class JarRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    entry_classes: List[str] = Field(default_factory=list)
    uploaded: Optional[int] = None              # epoch millis, when reported


class RunRequest(BaseModel):
    """Multipart payload for ``POST /jars/{jar_id}/run``."""

    jar_id: str
    entry_class: str
    parallelism: int = Field(default=1, ge=1)
    savepoint_path: Optional[str] = None
    allow_non_restored_state: bool = False
    program_args: Optional[str] = None

    def multipart_fields(self) -> dict:
        fields = {
            "allowNonRestoredState": (None, str(self.allow_non_restored_state).lower()),
            "parallelism": (None, str(self.parallelism)),
            "programArg": (None, self.program_args or ""),
            "entry-class": (None, self.entry_class),
        }
        if self.savepoint_path:
            fields["savepointPath"] = (None, self.savepoint_path)
        return fields


class RunOverrides(BaseModel):
    """Caller-supplied overrides for a jar run; unset fields fall back to defaults."""

    entry_class: Optional[str] = None
    parallelism: Optional[int] = Field(default=None, ge=1)
    savepoint_path: Optional[str] = None
    allow_non_restored_state: Optional[bool] = None
    program_args: Optional[str] = None
