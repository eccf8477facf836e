"""SQLAlchemy implementations of the application ports"""
from infrastructure.persistence.repositories.unit_of_work import SqlUnitOfWork
from infrastructure.persistence.repositories.user_repository import SqlUserRepository
from infrastructure.persistence.repositories.payment_repository import (
    SqlPaymentRepository, SqlEnrollmentRepository,
)
from infrastructure.persistence.repositories.center_repository import (
    SqlCenterRepository, SqlReferralRepository,
)
from infrastructure.persistence.repositories.notification_repository import SqlNotificationRepository
from infrastructure.persistence.repositories.enquiry_repository import SqlEnquiryRepository
