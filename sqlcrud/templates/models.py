from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SqlTemplate(BaseModel):
    name: str = Field(..., min_length=1, description="Registry key of the template")
    template: str = Field("", description="Template source text")
    last_modified: float = Field(0.0, description="mtime of the file the template came from")
    path: str | None = Field(default=None, description="Absolute path of that file")

    model_config = ConfigDict(frozen=True)
