"""
ORM models, re-exported
"""
from infrastructure.persistence.database import Base
from infrastructure.persistence.models.user import User
from infrastructure.persistence.models.center import Center
from infrastructure.persistence.models.payment import Payment
from infrastructure.persistence.models.enrollment import Enrollment
from infrastructure.persistence.models.referral import Referral
from infrastructure.persistence.models.notification import Notification
from infrastructure.persistence.models.enquiry import Enquiry
from domain.enums import (
    UserRole, SubscriptionPlan, PaymentStatus, EnrollmentStatus, ReferralStatus, NotificationType,
)
