"""Referral ORM model"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from infrastructure.persistence.database import Base
from domain.enums import ReferralStatus


class Referral(Base):
    __tablename__ = "referrals"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    center_id = Column(Integer, ForeignKey("centers.id"), nullable=False)
    referral_code = Column(String(20), nullable=False)
    status = Column(Enum(ReferralStatus), default=ReferralStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    paid_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Referral {self.id} - {self.status}>"
