from typing import Optional
from pydantic import BaseModel, Field
from cipherdrive.utils.base import now_ms


class TimeMixin(BaseModel):
    created_at: int = Field(
        default_factory=now_ms, description="Creation timestamp (epoch ms)")
    updated_at: Optional[int] = Field(
        default=None, description="Last update timestamp (epoch ms)")
