import logging
from sqlalchemy.orm import Session
from database.models import CategoryModel, TransactionModel, BudgetModel
from models.category import CategoryCreate, CategoryUpdate
from models.transaction import TransactionCreate, TransactionUpdate, TransactionFilter, TransactionType
from models.budget import BudgetCreate, BudgetUpdate
from datetime import datetime

logger = logging.getLogger(__name__)

class CategoryNotFoundError(Exception):
    """La catégorie référencée par une transaction ou un budget n'existe pas"""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"La catégorie {category_id} n'existe pas")

def _ensure_category_exists(db: Session, category_id: int):
    if get_category(db, category_id) is None:
        raise CategoryNotFoundError(category_id)

def _commit(db: Session):
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

def _save(db: Session, instance):
    _commit(db)
    db.refresh(instance)
    return instance

# Category CRUD functions
def create_category(db: Session, category: CategoryCreate):
    """Crée une nouvelle catégorie"""
    db_category = CategoryModel(
        name=category.name,
        color=category.color,
        icon=category.icon
    )
    db.add(db_category)
    return _save(db, db_category)

def get_category(db: Session, category_id: int):
    """Récupère une catégorie par son ID"""
    return db.query(CategoryModel).filter(CategoryModel.id == category_id).first()

def get_all_categories(db: Session):
    """Récupère toutes les catégories"""
    return db.query(CategoryModel).order_by(CategoryModel.id).all()

def update_category(db: Session, category_id: int, category_update: CategoryUpdate):
    """Met à jour une catégorie; None si elle n'existe pas"""
    category = get_category(db, category_id)
    if not category:
        return None

    for field, value in category_update.model_dump(exclude_unset=True).items():
        setattr(category, field, value)

    return _save(db, category)

def delete_category(db: Session, category_id: int):
    """
    Supprime une catégorie.

    Les transactions liées deviennent non catégorisées et les budgets liés sont
    supprimés, le tout dans une seule transaction.
    """
    category = get_category(db, category_id)
    if not category:
        return False

    try:
        detached = db.query(TransactionModel).filter(
            TransactionModel.category_id == category_id
        ).update({TransactionModel.category_id: None}, synchronize_session=False)
        removed_budgets = db.query(BudgetModel).filter(
            BudgetModel.category_id == category_id
        ).delete(synchronize_session=False)
        db.delete(category)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Catégorie {category_id} supprimée: {detached} transaction(s) décatégorisée(s), "
        f"{removed_budgets} budget(s) supprimé(s)"
    )
    return True

# Transaction CRUD functions
def create_transaction(db: Session, transaction: TransactionCreate):
    """Crée une nouvelle transaction"""
    if transaction.category_id is not None:
        _ensure_category_exists(db, transaction.category_id)

    db_transaction = TransactionModel(
        amount=transaction.amount,
        description=transaction.description,
        type=transaction.type,
        category_id=transaction.category_id,
        date=transaction.date
    )
    db.add(db_transaction)
    return _save(db, db_transaction)

def get_transaction_by_id(db: Session, transaction_id: int):
    """Récupère une transaction par son ID"""
    return db.query(TransactionModel).filter(TransactionModel.id == transaction_id).first()

def get_transactions(db: Session, transaction_filter: TransactionFilter = None):
    """Récupère les transactions; les critères du filtre sont combinés (ET), bornes incluses"""
    query = db.query(TransactionModel)
    if transaction_filter is not None:
        if transaction_filter.type is not None:
            query = query.filter(TransactionModel.type == transaction_filter.type)
        if transaction_filter.category_id is not None:
            query = query.filter(TransactionModel.category_id == transaction_filter.category_id)
        if transaction_filter.start_date is not None:
            query = query.filter(TransactionModel.date >= transaction_filter.start_date)
        if transaction_filter.end_date is not None:
            query = query.filter(TransactionModel.date <= transaction_filter.end_date)
    return query.order_by(TransactionModel.id).all()

def get_expenses(db: Session):
    """Récupère toutes les dépenses"""
    return get_transactions(db, TransactionFilter(type=TransactionType.EXPENSE))

def update_transaction(db: Session, transaction_id: int, transaction_update: TransactionUpdate):
    """Met à jour une transaction; None si elle n'existe pas"""
    transaction = get_transaction_by_id(db, transaction_id)
    if not transaction:
        return None

    changes = transaction_update.model_dump(exclude_unset=True)
    if changes.get('category_id') is not None:
        _ensure_category_exists(db, changes['category_id'])

    for field, value in changes.items():
        setattr(transaction, field, value)
    transaction.updated_at = datetime.now()

    return _save(db, transaction)

def delete_transaction(db: Session, transaction_id: int):
    """Supprime une transaction"""
    transaction = get_transaction_by_id(db, transaction_id)
    if not transaction:
        return False
    db.delete(transaction)
    _commit(db)
    return True

# Budget CRUD functions
def create_budget(db: Session, budget: BudgetCreate):
    """Crée un budget pour une catégorie existante"""
    _ensure_category_exists(db, budget.category_id)

    db_budget = BudgetModel(
        category_id=budget.category_id,
        amount=budget.amount,
        period=budget.period,
        start_date=budget.start_date,
        end_date=budget.end_date
    )
    db.add(db_budget)
    return _save(db, db_budget)

def get_budget(db: Session, budget_id: int):
    """Récupère un budget par son ID"""
    return db.query(BudgetModel).filter(BudgetModel.id == budget_id).first()

def get_all_budgets(db: Session):
    """Récupère tous les budgets, passés et futurs compris"""
    return db.query(BudgetModel).order_by(BudgetModel.id).all()

def update_budget(db: Session, budget_id: int, budget_update: BudgetUpdate):
    """Met à jour un budget; None s'il n'existe pas"""
    budget = get_budget(db, budget_id)
    if not budget:
        return None

    changes = budget_update.model_dump(exclude_unset=True)
    if 'category_id' in changes and changes['category_id'] != budget.category_id:
        _ensure_category_exists(db, changes['category_id'])

    for field, value in changes.items():
        setattr(budget, field, value)
    budget.updated_at = datetime.now()

    return _save(db, budget)

def delete_budget(db: Session, budget_id: int):
    """Supprime un budget"""
    budget = get_budget(db, budget_id)
    if not budget:
        return False
    db.delete(budget)
    _commit(db)
    return True
