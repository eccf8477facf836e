"""
API schemas, re-exported

Usage:
  from api.schemas import VerifyPaymentRequest, SendNotificationRequest
"""
from api.schemas.common import ResponseBase, ErrorResponse
from api.schemas.auth import (
    UserRegisterRequest, UserLoginRequest, TokenResponse, UserResponse,
)
from api.schemas.payment import (
    PlanInfo, PlansResponse, CreateOrderRequest, CreateOrderResponse,
    VerifyPaymentRequest, VerifyPaymentResponse, PaymentHistoryItem, PaymentHistoryResponse,
)
from api.schemas.notification import (
    NotificationFilter, SendNotificationRequest, SendNotificationResponse,
    NotificationItem, NotificationListResponse,
)
from api.schemas.center import (
    CenterRegisterRequest, CenterSummary, CenterRegisterResponse, CenterItem, CenterListResponse,
    PayoutRequest, PayoutResponse, ReferralRequest, ReferralItem, ReferralResponse, ReferralListResponse,
)
