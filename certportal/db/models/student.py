"""
Student model - one row per intern, including the issued certificate image.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, LargeBinary, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from certportal.db.base import Base


class Student(Base):
    """
    Student record.

    The certificate is stored as raw image bytes; it is only handed out
    (as a PDF) once the student is eligible and the certificate is approved.
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, unique=True, nullable=False)
    year = Column(Integer, nullable=True)
    branch = Column(String, nullable=True)
    college_id = Column(Integer, ForeignKey("colleges.id", ondelete="SET NULL"), nullable=True, index=True)

    # Certificate
    certificate = Column(LargeBinary, nullable=True)
    certificate_id = Column(String, nullable=True)
    eligible = Column(Boolean, nullable=False, default=False)
    certificate_approved = Column(Boolean, nullable=False, default=False)
    downloaded_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    college = relationship("College")

    @property
    def college_name(self):
        return self.college.name if self.college else None

    @property
    def has_certificate(self) -> bool:
        return bool(self.certificate)

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', eligible={self.eligible})>"
