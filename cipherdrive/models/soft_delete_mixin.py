from typing import Optional
from pydantic import BaseModel, Field


class SoftDeleteMixin(BaseModel):
    deleted_at: Optional[int] = Field(
        default=None, description="Trash timestamp (epoch ms); unset means live"
    )

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None
