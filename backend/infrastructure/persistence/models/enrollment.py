"""Enrollment ORM model"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import EnrollmentStatus


class Enrollment(Base):
    __tablename__ = "enrollments"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    center_id = Column(Integer, ForeignKey("centers.id"), nullable=False)
    # one enrollment per confirmed order
    order_id = Column(String(100), ForeignKey("payments.order_id"), unique=True, nullable=False)
    emi_plan = Column(String(50), nullable=False)
    status = Column(Enum(EnrollmentStatus), default=EnrollmentStatus.ACTIVE, nullable=False)
    enrolled_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    exam_date = Column(DateTime, nullable=True)
    user = relationship("User", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment {self.user_id}@{self.center_id} - {self.status}>"
