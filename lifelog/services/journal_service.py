"""
journal_service.py - Diary entries ("memories") and tags
Entry creation and editing with tags and inline transactions, paginated search, the
Favorite toggle and per-user tags.
"""

import logging
import math
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from lifelog.config import FAVORITE_TAG_NAME, FAVORITE_TAG_COLOR
from lifelog.errors import ConflictError, NotFoundError, ValidationError
from lifelog.models.diary_entry import DiaryEntry
from lifelog.models.tag import Tag, EntryTag
from lifelog.models.transaction import Transaction

logger = logging.getLogger(__name__)


def serialize_tag(tag: Tag) -> dict:
    return {"id": tag.id, "name": tag.name, "color": tag.color}


def serialize_entry(entry: DiaryEntry) -> dict:
    return {
        "id": entry.id,
        "title": entry.title,
        "content": entry.content,
        "mood": entry.mood,
        "highlight": entry.highlight,
        "gratitude": entry.gratitude,
        "expense": float(entry.expense) if entry.expense is not None else None,
        "expenseTitle": entry.expense_title,
        "expenseType": entry.expense_type,
        "entryDate": entry.entry_date.isoformat(),
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
        "updatedAt": entry.updated_at.isoformat() if entry.updated_at else None,
        "tags": [serialize_tag(t) for t in entry.tags],
        "transactions": [t.to_dict() for t in entry.transactions],
    }


def _check_tags(db: Session, user_id: int, tag_ids) -> None:
    if tag_ids:
        owned = db.query(Tag.id).filter(Tag.user_id == user_id, Tag.id.in_(tag_ids)).count()
        if owned != len(set(tag_ids)):
            raise ValidationError("Unknown tag id")


def _new_transaction(user_id: int, t: dict, when: datetime) -> Transaction:
    return Transaction(
        user_id=user_id,
        type=t["type"],
        amount=t["amount"],
        title=t["title"],
        description=t.get("description"),
        category=t.get("category"),
        date=when,
    )


def _with_tags(query):
    return query.options(
        selectinload(DiaryEntry.entry_tags).selectinload(EntryTag.tag),
        selectinload(DiaryEntry.transactions),
    )


class JournalService:
    @staticmethod
    def create(db: Session, user_id: int, data: dict, entry_date: datetime) -> DiaryEntry:
        tag_ids = data.get("tag_ids") or []
        _check_tags(db, user_id, tag_ids)

        try:
            entry = DiaryEntry(
                user_id=user_id,
                title=data.get("title"),
                content=data["content"],
                mood=data["mood"],
                highlight=data.get("highlight"),
                gratitude=data.get("gratitude"),
                expense=data.get("expense"),
                expense_title=data.get("expense_title"),
                expense_type=data.get("expense_type") or "expense",
                entry_date=entry_date,
            )
            for tag_id in set(tag_ids):
                entry.entry_tags.append(EntryTag(tag_id=tag_id))
            for t in data.get("transactions") or []:
                entry.transactions.append(_new_transaction(user_id, t, entry_date))
            db.add(entry)
            db.commit()
            logger.info("user %s created entry %s", user_id, entry.id)
            return JournalService.get(db, user_id, entry.id)
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def get(db: Session, user_id: int, entry_id: int) -> DiaryEntry:
        entry = _with_tags(db.query(DiaryEntry)).filter_by(id=entry_id, user_id=user_id).first()
        if not entry:
            raise NotFoundError("Memory not found")
        return entry

    @staticmethod
    def update(db: Session, user_id: int, entry_id: int, data: dict, entry_date: datetime | None = None) -> DiaryEntry:
        """Edit an entry in place.

        tag_ids, when given, replaces the entry's tags. transactions, when
        given, replaces the linked transactions, dated on the entry's day.
        """
        entry = JournalService.get(db, user_id, entry_id)
        tag_ids = data.get("tag_ids")
        if tag_ids is not None:
            _check_tags(db, user_id, tag_ids)

        try:
            for field in ("content", "mood"):
                if data.get(field) is not None:
                    setattr(entry, field, data[field])
            for field in ("title", "highlight", "gratitude", "expense", "expense_title"):
                if field in data:
                    setattr(entry, field, data[field])
            if data.get("expense_type"):
                entry.expense_type = data["expense_type"]
            if entry_date is not None:
                entry.entry_date = entry_date

            if tag_ids is not None:
                wanted = set(tag_ids)
                for link in list(entry.entry_tags):
                    if link.tag_id in wanted:
                        wanted.discard(link.tag_id)
                    else:
                        entry.entry_tags.remove(link)
                for tag_id in wanted:
                    entry.entry_tags.append(EntryTag(tag_id=tag_id))

            if data.get("transactions") is not None:
                for old in list(entry.transactions):
                    entry.transactions.remove(old)
                    db.delete(old)
                for t in data["transactions"]:
                    entry.transactions.append(_new_transaction(user_id, t, entry.entry_date))

            entry.updated_at = datetime.now(timezone.utc)
            db.commit()
            logger.info("user %s updated entry %s", user_id, entry_id)
            return JournalService.get(db, user_id, entry_id)
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def get_page(db: Session, user_id: int, page: int = 1, limit: int = 10, q: str = "", mood: str = "") -> dict:
        query = db.query(DiaryEntry).filter(DiaryEntry.user_id == user_id)
        if q:
            pattern = f"%{q}%"
            query = query.filter(or_(DiaryEntry.title.ilike(pattern), DiaryEntry.content.ilike(pattern)))
        if mood:
            query = query.filter(DiaryEntry.mood == mood)

        total = query.count()
        entries = (
            _with_tags(query)
            .order_by(DiaryEntry.entry_date.desc(), DiaryEntry.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "entries": [serialize_entry(e) for e in entries],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    @staticmethod
    def delete(db: Session, user_id: int, entry_id: int) -> None:
        entry = JournalService.get(db, user_id, entry_id)
        try:
            db.delete(entry)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def toggle_favorite(db: Session, user_id: int, entry_id: int) -> bool:
        """Attach or detach the user's Favorite tag. Returns the new state."""
        if not db.query(DiaryEntry.id).filter_by(id=entry_id, user_id=user_id).first():
            raise NotFoundError("Memory not found")
        try:
            tag = db.query(Tag).filter_by(user_id=user_id, name=FAVORITE_TAG_NAME).first()
            if not tag:
                tag = Tag(user_id=user_id, name=FAVORITE_TAG_NAME, color=FAVORITE_TAG_COLOR)
                db.add(tag)
                db.flush()

            link = db.query(EntryTag).filter_by(entry_id=entry_id, tag_id=tag.id).first()
            if link:
                db.delete(link)
                favorited = False
            else:
                db.add(EntryTag(entry_id=entry_id, tag_id=tag.id))
                favorited = True
            db.commit()
            return favorited
        except SQLAlchemyError:
            db.rollback()
            raise


class TagService:
    @staticmethod
    def get_all(db: Session, user_id: int) -> list[Tag]:
        return db.query(Tag).filter_by(user_id=user_id).order_by(Tag.name.asc()).all()

    @staticmethod
    def create(db: Session, user_id: int, name: str, color: str | None = None) -> Tag:
        try:
            tag = Tag(user_id=user_id, name=name, color=color)
            db.add(tag)
            db.commit()
            db.refresh(tag)
            return tag
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Tag with this name already exists") from e
        except SQLAlchemyError:
            db.rollback()
            raise
