from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"

class CategoryIn(BaseModel):
    name: str = Field(min_length=1)
    color: str = Field(default="#3b82f6", pattern=HEX_COLOR)

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)

class CategoryOut(CategoryIn):
    id: str
    user_id: str
    created_at: datetime

    class Config:
        from_attributes = True
