from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from lifelog.database import Base


class DiaryEntry(Base):
    __tablename__ = "diary_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    mood = Column(String(50), nullable=False)  # free-form label, e.g. "happy"
    highlight = Column(Text, nullable=True)
    gratitude = Column(Text, nullable=True)
    expense = Column(Float, nullable=True)
    expense_title = Column(String(255), nullable=True)
    expense_type = Column(String(20), default="expense")
    entry_date = Column(DateTime, nullable=False, index=True)  # only the calendar day matters
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=True)

    entry_tags = relationship("EntryTag", back_populates="entry", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="entry")

    @property
    def tags(self):
        return [et.tag for et in self.entry_tags]
