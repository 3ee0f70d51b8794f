from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional

HEX_COLOR_PATTERN = r'^#[0-9A-Fa-f]{6}$'

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)  # ex: #FF5733
    icon: Optional[str] = None

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    """Mise à jour partielle: seuls les champs envoyés sont appliqués"""
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    icon: Optional[str] = None

    @field_validator('name', 'color')
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("ce champ ne peut pas être null")
        return value

class Category(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
