from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime
from lifelog.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    image = Column(Text, nullable=True)  # http(s) URL or data:image/ URL
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "image": self.image,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
