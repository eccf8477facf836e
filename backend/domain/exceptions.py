"""Domain exceptions

Every error carries the HTTP status it maps to; main.py renders them as
``{"detail": message}``.
"""


class DomainError(Exception):
    """Base error for the domain layer"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---- client input (400) ----

class InvalidSignatureError(DomainError):
    def __init__(self):
        super().__init__("Invalid signature")


class MissingFieldsError(DomainError):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class InvalidFieldError(DomainError):
    pass


class NoRecipientsError(DomainError):
    def __init__(self, message: str = "No users found matching criteria"):
        super().__init__(message)


# ---- auth (401/403) ----

class InvalidCredentialsError(DomainError):
    status_code = 401

    def __init__(self):
        super().__init__("Invalid email or password.")


class AccountDisabledError(DomainError):
    status_code = 403

    def __init__(self):
        super().__init__("Account is disabled.")


class WebhookSignatureError(DomainError):
    status_code = 401


class PermissionDeniedError(DomainError):
    status_code = 403

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"Forbidden: {role} role required.")


class PaymentOwnershipError(DomainError):
    status_code = 403

    def __init__(self):
        super().__init__("Payment does not belong to this user.")


# ---- not found / conflict (404/409) ----

class PaymentNotFoundError(DomainError):
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__(f"Payment not found for order: {order_id}")


class CenterNotFoundError(DomainError):
    status_code = 404

    def __init__(self, center_id):
        super().__init__(f"Center not found: {center_id}")


class ReferralNotFoundError(DomainError):
    status_code = 404

    def __init__(self, referral_code: str):
        super().__init__(f"No center found for referral code: {referral_code}")


class NotificationNotFoundError(DomainError):
    status_code = 404

    def __init__(self, notification_id: int):
        super().__init__(f"Notification not found: {notification_id}")


class DuplicateCenterError(DomainError):
    status_code = 409

    def __init__(self, message: str = "Center with this email or phone already exists"):
        super().__init__(message)


class EmailAlreadyRegisteredError(DomainError):
    status_code = 409

    def __init__(self):
        super().__init__("Email is already registered.")


# ---- downstream (500) ----

class PersistenceError(DomainError):
    status_code = 500


class EnrollmentWriteError(PersistenceError):
    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Failed to verify payment: {cause}")


class NotificationDispatchError(PersistenceError):
    def __init__(self, inserted: int, cause: str):
        self.inserted = inserted
        self.cause = cause
        super().__init__(f"Failed to send notification after {inserted} deliveries: {cause}")


class GatewayError(DomainError):
    status_code = 500
