from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from lifelog.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    entry_id = Column(Integer, ForeignKey("diary_entries.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(20), nullable=False)  # income/expense
    amount = Column(Float, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    entry = relationship("DiaryEntry", back_populates="transactions")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "entryId": self.entry_id,
            "type": self.type,
            "amount": float(self.amount),
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "date": self.date.isoformat(),
        }
