import calendar
import logging
from typing import List, Dict, Optional
from collections import defaultdict
from datetime import date, timedelta

from models.budget import BudgetPeriod
from models.report import BudgetStatus, CategoryExpense, DateRange, FinancialReport
from models.transaction import TransactionType

logger = logging.getLogger(__name__)

def add_months(start: date, months: int) -> date:
    """
    Ajoute un nombre de mois calendaires à une date.

    Le jour est ramené au dernier jour valide du mois visé
    (31 janvier + 1 mois = 28 ou 29 février).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))

def effective_end_date(start_date: date, period: BudgetPeriod, end_date: Optional[date] = None) -> date:
    """Date de fin réelle d'un budget: end_date si fixée, sinon déduite de la période"""
    if end_date is not None:
        return end_date
    if period == BudgetPeriod.WEEKLY:
        return start_date + timedelta(days=7)
    if period == BudgetPeriod.MONTHLY:
        return add_months(start_date, 1)
    if period == BudgetPeriod.YEARLY:
        return add_months(start_date, 12)
    raise ValueError(f"Période de budget inconnue: {period}")

def percentage_used(spent: int, limit: int) -> int:
    """Pourcentage consommé, arrondi à l'entier le plus proche (demi vers le haut)"""
    if limit <= 0:
        return 0
    return (spent * 200 + limit) // (limit * 2)

class AnalysisService:
    """Calculs dérivés (état des budgets, rapport financier) à partir des lignes lues en base"""

    def budget_status(self, budgets: List, category_names: Dict[int, str], expenses: List) -> List[BudgetStatus]:
        """
        Calcule l'état de chaque budget.

        Args:
            budgets: tous les budgets, actifs ou non
            category_names: nom de chaque catégorie existante, par ID
            expenses: transactions de type dépense

        Les budgets dont la catégorie n'existe plus sont ignorés.
        """
        statuses = []

        for budget in budgets:
            category_name = category_names.get(budget.category_id)
            if category_name is None:
                logger.debug(f"Budget {budget.id} ignoré: catégorie {budget.category_id} introuvable")
                continue

            end = effective_end_date(budget.start_date, budget.period, budget.end_date)
            spent = sum(
                t.amount for t in expenses
                if t.type == TransactionType.EXPENSE
                and t.category_id == budget.category_id
                and budget.start_date <= t.date <= end
            )

            statuses.append(BudgetStatus(
                id=budget.id,
                category_id=budget.category_id,
                category_name=category_name,
                budget_amount=budget.amount,
                spent_amount=spent,
                remaining_amount=budget.amount - spent,
                percentage_used=percentage_used(spent, budget.amount),
                period=budget.period,
                start_date=budget.start_date,
                end_date=budget.end_date,
                effective_end_date=end,
                is_over_budget=spent > budget.amount
            ))

        return statuses

    def financial_report(self, transactions: List, category_names: Dict[int, str], date_range: DateRange) -> FinancialReport:
        """
        Génère le rapport financier d'une période.

        Les transactions hors de la période sont ignorées; une borne absente
        n'est pas appliquée.
        """
        total_income = 0
        total_expenses = 0
        by_category = defaultdict(int)

        for transaction in transactions:
            if date_range.start_date is not None and transaction.date < date_range.start_date:
                continue
            if date_range.end_date is not None and transaction.date > date_range.end_date:
                continue

            if transaction.type == TransactionType.INCOME:
                total_income += transaction.amount
            else:
                total_expenses += transaction.amount
                by_category[transaction.category_id] += transaction.amount

        # Tri par ID de catégorie, les non catégorisées en dernier
        ordered = sorted(by_category.items(), key=lambda x: (x[0] is None, x[0] or 0))
        expense_by_category = [
            CategoryExpense(
                category_id=category_id,
                category_name=category_names.get(category_id) if category_id is not None else None,
                total_amount=amount
            )
            for category_id, amount in ordered
        ]

        return FinancialReport(
            total_income=total_income,
            total_expenses=total_expenses,
            net_income=total_income - total_expenses,
            expense_by_category=expense_by_category,
            period=date_range
        )
