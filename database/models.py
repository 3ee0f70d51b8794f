from sqlalchemy import Column, Integer, String, Date, DateTime, Enum as SqEnum
from datetime import datetime
from database.database import Base
from models.transaction import TransactionType
from models.budget import BudgetPeriod

class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False)  # Code hexadécimal, ex: #FF5733
    icon = Column(String, nullable=True)  # Nom d'icône ou emoji
    created_at = Column(DateTime, default=datetime.now, nullable=False)

class TransactionModel(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Integer, nullable=False)  # En centimes
    description = Column(String, nullable=False)
    type = Column(SqEnum(TransactionType), nullable=False, index=True)
    # Pas de clé étrangère stricte: null = non catégorisée
    category_id = Column(Integer, nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

class BudgetModel(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # Limite en centimes
    period = Column(SqEnum(BudgetPeriod), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # null = budget en cours, sans fin fixe
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
