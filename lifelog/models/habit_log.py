from sqlalchemy import Column, Integer, Date, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from lifelog.database import Base


class HabitLog(Base):
    __tablename__ = "habit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False)
    log_date = Column(Date, nullable=False)
    is_completed = Column(Boolean, default=False)

    habit = relationship("Habit", back_populates="logs")

    __table_args__ = (
        UniqueConstraint("habit_id", "log_date", name="uq_habit_log_date"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "habitId": self.habit_id,
            "logDate": self.log_date.isoformat(),
            "isCompleted": bool(self.is_completed),
        }
