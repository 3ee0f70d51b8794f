from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Optional
import logging
import os

from dotenv import load_dotenv

# Charger le .env avant d'importer la configuration de la base
load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import uvicorn

from services.analysis_service import AnalysisService
from database.database import init_db, get_db
from database.crud import (
    CategoryNotFoundError,
    create_category, get_all_categories, update_category, delete_category,
    create_transaction, get_transactions, get_expenses, update_transaction, delete_transaction,
    create_budget, get_all_budgets, update_budget, delete_budget
)
from models.category import Category, CategoryCreate, CategoryUpdate
from models.transaction import Transaction, TransactionCreate, TransactionUpdate, TransactionFilter, TransactionType
from models.budget import Budget, BudgetCreate, BudgetUpdate
from models.report import DateRange

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database
    init_db()
    yield

app = FastAPI(title="Personal Finance API", version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
analysis_service = AnalysisService()

def _category_names(db: Session):
    return {c.id: c.name for c in get_all_categories(db)}

def _store_error(action: str, error: Exception):
    logger.error(f"Erreur lors de {action}: {str(error)}")
    return HTTPException(status_code=500, detail=str(error))

@app.get("/healthcheck")
async def healthcheck():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

# Category endpoints
@app.post("/api/categories")
def create_category_endpoint(category: CategoryCreate, db: Session = Depends(get_db)):
    """
    Crée une nouvelle catégorie
    """
    try:
        db_category = create_category(db, category)
        return JSONResponse({
            "success": True,
            "category": Category.model_validate(db_category).model_dump(mode="json")
        })
    except Exception as e:
        raise _store_error("la création de la catégorie", e)

@app.get("/api/categories")
def get_categories_endpoint(db: Session = Depends(get_db)):
    """
    Récupère toutes les catégories
    """
    try:
        categories = get_all_categories(db)
        return JSONResponse({
            "success": True,
            "categories": [Category.model_validate(c).model_dump(mode="json") for c in categories]
        })
    except Exception as e:
        raise _store_error("la lecture des catégories", e)

@app.patch("/api/categories/{category_id}")
def update_category_endpoint(category_id: int, category_update: CategoryUpdate, db: Session = Depends(get_db)):
    """
    Met à jour une catégorie
    """
    try:
        updated_category = update_category(db, category_id, category_update)
        if not updated_category:
            raise HTTPException(status_code=404, detail=f"Catégorie {category_id} non trouvée")

        return JSONResponse({
            "success": True,
            "category": Category.model_validate(updated_category).model_dump(mode="json")
        })
    except HTTPException:
        raise
    except Exception as e:
        raise _store_error("la mise à jour de la catégorie", e)

@app.delete("/api/categories/{category_id}")
def delete_category_endpoint(category_id: int, db: Session = Depends(get_db)):
    """
    Supprime une catégorie, décatégorise ses transactions et supprime ses budgets
    """
    try:
        deleted = delete_category(db, category_id)
        return JSONResponse({"success": True, "deleted": deleted})
    except Exception as e:
        raise _store_error("la suppression de la catégorie", e)

# Transaction endpoints
@app.post("/api/transactions")
def create_transaction_endpoint(transaction: TransactionCreate, db: Session = Depends(get_db)):
    """
    Crée une transaction (revenu ou dépense)
    """
    try:
        transaction_db = create_transaction(db, transaction)
        return JSONResponse({
            "success": True,
            "transaction": Transaction.model_validate(transaction_db).model_dump(mode="json")
        })
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _store_error("la création de la transaction", e)

@app.get("/api/transactions")
def get_transactions_endpoint(
    type: Optional[TransactionType] = None,
    category_id: Optional[int] = None,
    start_date: Optional[date] = Query(None, description="Borne incluse, YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="Borne incluse, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    """
    Récupère les transactions, optionnellement filtrées (critères combinés)
    """
    try:
        transaction_filter = TransactionFilter(
            type=type,
            category_id=category_id,
            start_date=start_date,
            end_date=end_date
        )
        transactions = get_transactions(db, transaction_filter)
        return JSONResponse({
            "success": True,
            "transactions": [Transaction.model_validate(t).model_dump(mode="json") for t in transactions]
        })
    except Exception as e:
        raise _store_error("la lecture des transactions", e)

@app.patch("/api/transactions/{transaction_id}")
def update_transaction_endpoint(
    transaction_id: int,
    transaction_update: TransactionUpdate,
    db: Session = Depends(get_db)
):
    """
    Met à jour une transaction (seuls les champs envoyés sont modifiés)
    """
    try:
        updated_transaction = update_transaction(db, transaction_id, transaction_update)
        if not updated_transaction:
            raise HTTPException(status_code=404, detail=f"Transaction {transaction_id} non trouvée")

        return JSONResponse({
            "success": True,
            "transaction": Transaction.model_validate(updated_transaction).model_dump(mode="json")
        })
    except HTTPException:
        raise
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _store_error("la mise à jour de la transaction", e)

@app.delete("/api/transactions/{transaction_id}")
def delete_transaction_endpoint(transaction_id: int, db: Session = Depends(get_db)):
    """
    Supprime une transaction spécifique
    """
    try:
        deleted = delete_transaction(db, transaction_id)
        return JSONResponse({"success": True, "deleted": deleted})
    except Exception as e:
        raise _store_error("la suppression de la transaction", e)

# Budget endpoints
@app.post("/api/budgets")
def create_budget_endpoint(budget: BudgetCreate, db: Session = Depends(get_db)):
    """
    Crée un budget pour une catégorie
    """
    try:
        db_budget = create_budget(db, budget)
        return JSONResponse({
            "success": True,
            "budget": Budget.model_validate(db_budget).model_dump(mode="json")
        })
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _store_error("la création du budget", e)

@app.get("/api/budgets")
def get_budgets_endpoint(db: Session = Depends(get_db)):
    """
    Récupère tous les budgets, y compris passés et à venir
    """
    try:
        budgets = get_all_budgets(db)
        return JSONResponse({
            "success": True,
            "budgets": [Budget.model_validate(b).model_dump(mode="json") for b in budgets]
        })
    except Exception as e:
        raise _store_error("la lecture des budgets", e)

@app.get("/api/budgets/status")
def get_budget_status_endpoint(db: Session = Depends(get_db)):
    """
    Récupère l'état de chaque budget: dépensé, restant, pourcentage et dépassement
    """
    try:
        statuses = analysis_service.budget_status(
            get_all_budgets(db),
            _category_names(db),
            get_expenses(db)
        )
        return JSONResponse({
            "success": True,
            "statuses": [s.model_dump(mode="json") for s in statuses]
        })
    except Exception as e:
        raise _store_error("le calcul de l'état des budgets", e)

@app.patch("/api/budgets/{budget_id}")
def update_budget_endpoint(budget_id: int, budget_update: BudgetUpdate, db: Session = Depends(get_db)):
    """
    Met à jour un budget
    """
    try:
        updated_budget = update_budget(db, budget_id, budget_update)
        if not updated_budget:
            raise HTTPException(status_code=404, detail=f"Budget {budget_id} non trouvé")

        return JSONResponse({
            "success": True,
            "budget": Budget.model_validate(updated_budget).model_dump(mode="json")
        })
    except HTTPException:
        raise
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _store_error("la mise à jour du budget", e)

@app.delete("/api/budgets/{budget_id}")
def delete_budget_endpoint(budget_id: int, db: Session = Depends(get_db)):
    """
    Supprime un budget
    """
    try:
        deleted = delete_budget(db, budget_id)
        return JSONResponse({"success": True, "deleted": deleted})
    except Exception as e:
        raise _store_error("la suppression du budget", e)

# Report endpoints
@app.get("/api/reports/financial")
def get_financial_report_endpoint(
    start_date: Optional[date] = Query(None, description="Borne incluse, YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="Borne incluse, YYYY-MM-DD"),
    db: Session = Depends(get_db)
):
    """
    Rapport financier: revenus, dépenses, solde net et dépenses par catégorie
    """
    try:
        # Les bornes absentes restent absentes dans la période renvoyée
        bounds = {}
        if start_date is not None:
            bounds['start_date'] = start_date
        if end_date is not None:
            bounds['end_date'] = end_date
        date_range = DateRange(**bounds)

        transactions = get_transactions(db, TransactionFilter(**bounds))
        report = analysis_service.financial_report(transactions, _category_names(db), date_range)
        return JSONResponse({
            "success": True,
            "report": report.model_dump(mode="json", exclude_unset=True)
        })
    except Exception as e:
        raise _store_error("la génération du rapport", e)

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "2022"))
    )
