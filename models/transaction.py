from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date as date_type, datetime
from enum import Enum
from typing import Optional

class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

def coerce_date(value):
    """Ne garde que la date calendaire (l'heure est ignorée)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[10] in ('T', ' '):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
        except ValueError:
            # Laissé tel quel: pydantic le rejettera
            return value
    return value

class TransactionBase(BaseModel):
    amount: int = Field(..., gt=0)  # En centimes
    description: str = Field(..., min_length=1)
    type: TransactionType
    category_id: Optional[int] = None
    date: date_type

    @field_validator('date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(BaseModel):
    """Mise à jour partielle; category_id peut être remis à null explicitement"""
    amount: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1)
    type: Optional[TransactionType] = None
    category_id: Optional[int] = None
    date: Optional[date_type] = None

    @field_validator('date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

    @field_validator('amount', 'description', 'type', 'date')
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("ce champ ne peut pas être null")
        return value

class TransactionFilter(BaseModel):
    type: Optional[TransactionType] = None
    category_id: Optional[int] = None
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

class Transaction(TransactionBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
