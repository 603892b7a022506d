"""Base model class for all stored records."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DBModel(BaseModel):
    """Base model for all stored records."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=False)

    id: Optional[str] = Field(None, description="Opaque record identifier")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
