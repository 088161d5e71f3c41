from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from certportal.db.base import Base


class College(Base):
    __tablename__ = "colleges"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<College(id={self.id}, name='{self.name}')>"
