from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from enum import Enum
from typing import Optional
from models.transaction import coerce_date

class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

class BudgetBase(BaseModel):
    category_id: int
    amount: int = Field(..., gt=0)  # Limite en centimes
    period: BudgetPeriod
    start_date: date
    end_date: Optional[date] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

class BudgetCreate(BudgetBase):
    pass

class BudgetUpdate(BaseModel):
    category_id: Optional[int] = None
    amount: Optional[int] = Field(None, gt=0)
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

    @field_validator('category_id', 'amount', 'period', 'start_date')
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("ce champ ne peut pas être null")
        return value

class Budget(BudgetBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
