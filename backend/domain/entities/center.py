"""Center (exam centre / partner) domain entity"""
import re
import secrets
from dataclasses import dataclass
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


@dataclass
class CenterEntity:
    id: int
    name: str
    city: str
    referral_code: str
    verified: bool = False
    owner_user_id: Optional[int] = None
    upi_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


def generate_referral_code(city: str) -> str:
    """City prefix plus six upper-case hex characters, e.g. ``KOC1A2B3C``"""
    return f"{city[:3].upper()}{secrets.token_hex(3).upper()}"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def is_valid_phone(phone: str) -> bool:
    """Only the last ten digits count; separators and country codes are ignored"""
    digits = re.sub(r"\D", "", phone or "")[-10:]
    return bool(PHONE_PATTERN.match(digits))
