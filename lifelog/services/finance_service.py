"""
finance_service.py - Income & expense transactions
Filtered, paginated listing plus the summary blocks shown next to it:
totals and balance, per-category sums and per-month totals for the current year.
"""

import math
from datetime import date, datetime, timedelta

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifelog.clock import Clock
from lifelog.errors import NotFoundError, ValidationError
from lifelog.models.diary_entry import DiaryEntry
from lifelog.models.transaction import Transaction


class FinanceService:
    @staticmethod
    def get_owned(db: Session, user_id: int, transaction_id: int) -> Transaction:
        t = db.query(Transaction).filter_by(id=transaction_id, user_id=user_id).first()
        if not t:
            raise NotFoundError("Transaction not found")
        return t

    @staticmethod
    def create(db: Session, user_id: int, data: dict, when: datetime) -> Transaction:
        entry_id = data.get("entry_id")
        # A transaction may only hang off one of the caller's own entries
        if entry_id is not None and not db.query(DiaryEntry.id).filter_by(id=entry_id, user_id=user_id).first():
            raise NotFoundError("Memory not found")
        try:
            t = Transaction(
                user_id=user_id,
                entry_id=entry_id,
                type=data["type"],
                amount=data["amount"],
                title=data["title"],
                description=data.get("description"),
                category=data.get("category"),
                date=when,
            )
            db.add(t)
            db.commit()
            db.refresh(t)
            return t
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def update(db: Session, user_id: int, transaction_id: int, data: dict, when: datetime | None = None) -> Transaction:
        """Partial update; only the fields present in data are touched."""
        t = FinanceService.get_owned(db, user_id, transaction_id)
        try:
            for field in ("type", "amount", "title"):
                if data.get(field) is not None:
                    setattr(t, field, data[field])
            # description and category may be cleared with an explicit null
            for field in ("description", "category"):
                if field in data:
                    setattr(t, field, data[field])
            if when is not None:
                t.date = when
            db.commit()
            db.refresh(t)
            return t
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, transaction_id: int) -> None:
        t = FinanceService.get_owned(db, user_id, transaction_id)
        try:
            db.delete(t)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def summary(db: Session, user_id: int) -> dict:
        rows = (
            db.query(Transaction.type, func.sum(Transaction.amount))
            .filter(Transaction.user_id == user_id)
            .group_by(Transaction.type)
            .all()
        )
        sums = {kind: float(total or 0) for kind, total in rows}
        income, expense = sums.get("income", 0.0), sums.get("expense", 0.0)
        return {"totalIncome": income, "totalExpense": expense, "balance": income - expense}

    @staticmethod
    def category_breakdown(db: Session, user_id: int) -> list[dict]:
        rows = (
            db.query(Transaction.category, Transaction.type, func.sum(Transaction.amount), func.count(Transaction.id))
            .filter(Transaction.user_id == user_id)
            .group_by(Transaction.category, Transaction.type)
            .all()
        )
        return [
            {"category": category or "Uncategorized", "type": kind, "total": float(total or 0), "count": count}
            for category, kind, total, count in rows
        ]

    @staticmethod
    def monthly_totals(db: Session, user_id: int, clock: Clock) -> dict:
        """Income/expense per month of the current year, keyed "01".."12"."""
        year = clock.today().year
        # Slack of a day on both ends; exact year check happens on the local date
        lower = datetime(year, 1, 1) - timedelta(days=1)
        upper = datetime(year + 1, 1, 1) + timedelta(days=1)
        rows = (
            db.query(Transaction.type, Transaction.amount, Transaction.date)
            .filter(Transaction.user_id == user_id, Transaction.date >= lower, Transaction.date < upper)
            .all()
        )
        monthly = {f"{m:02d}": {"income": 0.0, "expense": 0.0} for m in range(1, 13)}
        for kind, amount, when in rows:
            day = clock.to_local_date(when)
            if day.year == year and kind in ("income", "expense"):
                monthly[f"{day.month:02d}"][kind] += float(amount)
        return monthly

    @staticmethod
    def get_page(db: Session, user_id: int, clock: Clock, page: int = 1, limit: int = 20,
                 type: str = "", category: str = "", date_from: date | None = None,
                 date_to: date | None = None, q: str = "") -> dict:
        if date_from and date_to and date_from > date_to:
            raise ValidationError("dateFrom must not be after dateTo")

        query = db.query(Transaction).filter(Transaction.user_id == user_id)
        if type:
            query = query.filter(Transaction.type == type)
        if category:
            query = query.filter(Transaction.category == category)
        if q:
            pattern = f"%{q}%"
            query = query.filter(or_(Transaction.title.ilike(pattern), Transaction.description.ilike(pattern)))

        rows = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()
        if date_from or date_to:
            # Inclusive bounds on the local calendar day
            rows = [
                t for t in rows
                if (not date_from or clock.to_local_date(t.date) >= date_from)
                and (not date_to or clock.to_local_date(t.date) <= date_to)
            ]

        total = len(rows)
        start = (page - 1) * limit
        return {
            "transactions": [t.to_dict() for t in rows[start:start + limit]],
            "pagination": {"page": page, "limit": limit, "total": total, "totalPages": math.ceil(total / limit)},
            "summary": FinanceService.summary(db, user_id),
            "categoryBreakdown": FinanceService.category_breakdown(db, user_id),
            "monthly": FinanceService.monthly_totals(db, user_id, clock),
        }
