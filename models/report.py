from pydantic import BaseModel, field_validator
from datetime import date
from typing import List, Optional
from models.budget import BudgetPeriod
from models.transaction import coerce_date

class DateRange(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def strip_time(cls, value):
        return coerce_date(value)

class BudgetStatus(BaseModel):
    id: int
    category_id: int
    category_name: str
    budget_amount: int
    spent_amount: int
    remaining_amount: int  # Peut être négatif
    percentage_used: int
    period: BudgetPeriod
    start_date: date
    end_date: Optional[date] = None
    effective_end_date: date
    is_over_budget: bool

class CategoryExpense(BaseModel):
    category_id: Optional[int] = None  # null = non catégorisée
    category_name: Optional[str] = None
    total_amount: int

class FinancialReport(BaseModel):
    total_income: int
    total_expenses: int
    net_income: int
    expense_by_category: List[CategoryExpense]
    period: DateRange
