"""Payment ORM model"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    center_id = Column(Integer, ForeignKey("centers.id"), nullable=True)
    order_id = Column(String(100), unique=True, nullable=False)
    payment_id = Column(String(100), nullable=True)
    signature = Column(String(128), nullable=True)
    amount = Column(Integer, nullable=False)  # paise
    currency = Column(String(3), default="INR", nullable=False)
    emi_plan = Column(String(50), nullable=True)
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_method = Column(String(50), default="razorpay", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    paid_at = Column(DateTime, nullable=True)
    user = relationship("User", back_populates="payments")

    def __repr__(self):
        return f"<Payment {self.order_id} - {self.status}>"
