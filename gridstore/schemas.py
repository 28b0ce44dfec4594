"""Pydantic schemas for upload options."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue, StrictInt


class UploadOptions(BaseModel):
    """Options accepted when opening an upload stream."""
    model_config = ConfigDict(frozen=True)

    chunk_size_bytes: StrictInt = Field(gt=0)
    metadata: Optional[Dict[str, JsonValue]] = None
