"""Enquiry ORM model"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from infrastructure.persistence.database import Base


class Enquiry(Base):
    __tablename__ = "enquiries"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    preferred_district = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Enquiry {self.id} - {self.email}>"
