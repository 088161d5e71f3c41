"""
Certificate template model - one background image per company.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from certportal.db.base import Base


class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    template = Column(Text, nullable=False)  # base64 data URL of the image
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    is_selected = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    company = relationship("Company")

    @property
    def company_name(self):
        return self.company.name if self.company else None

    def __repr__(self):
        return f"<Template(id={self.id}, company_id={self.company_id}, is_selected={self.is_selected})>"
