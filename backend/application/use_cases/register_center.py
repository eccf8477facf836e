"""Center onboarding use case"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from domain.entities.center import CenterEntity, generate_referral_code, is_valid_email, is_valid_phone
from domain.exceptions import MissingFieldsError, InvalidFieldError, DuplicateCenterError
from application.ports.center_repository import CenterRepository

REQUIRED_FIELDS = ["name", "address", "city", "phone", "email", "owner_name", "owner_phone", "fees"]


@dataclass
class RegisterCenterInput:
    name: Optional[str]
    address: Optional[str]
    city: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    owner_name: Optional[str]
    owner_phone: Optional[str]
    fees: Optional[int]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    capacity: Optional[int] = None
    upi_id: Optional[str] = None
    owner_user_id: Optional[int] = None


class RegisterCenterUseCase:
    def __init__(self, center_repo: CenterRepository, referral_code_attempts: int = 5,
                 default_capacity: int = 50, code_generator=generate_referral_code):
        self._center_repo = center_repo
        self._attempts = referral_code_attempts
        self._default_capacity = default_capacity
        self._generate_code = code_generator

    def validate(self, input: RegisterCenterInput) -> None:
        missing = [name for name in REQUIRED_FIELDS if not getattr(input, name)]
        if missing:
            raise MissingFieldsError(missing)
        if not is_valid_email(input.email):
            raise InvalidFieldError("Invalid email format")
        if not is_valid_phone(input.phone):
            raise InvalidFieldError("Invalid phone number format")

    async def unique_referral_code(self, city: str) -> str:
        """Regenerate while taken, at most ``attempts`` times; the unique index is the final guard"""
        code = self._generate_code(city)
        for _ in range(self._attempts):
            if not await self._center_repo.referral_code_taken(code):
                break
            code = self._generate_code(city)
        return code

    async def execute(self, input: RegisterCenterInput) -> CenterEntity:
        self.validate(input)

        if await self._center_repo.exists_with_contact(input.email, input.phone):
            raise DuplicateCenterError()

        referral_code = await self.unique_referral_code(input.city)
        center = await self._center_repo.create({
            "name": input.name,
            "address": input.address,
            "city": input.city.lower(),
            "phone": input.phone,
            "email": input.email,
            "owner_name": input.owner_name,
            "owner_phone": input.owner_phone,
            "owner_user_id": input.owner_user_id,
            "latitude": input.latitude,
            "longitude": input.longitude,
            "fees": input.fees,
            "capacity": input.capacity or self._default_capacity,
            "upi_id": input.upi_id,
            "referral_code": referral_code,
            "verified": False,  # admin approval required
            "rating": 0.0,
        })
        logger.info(f"Center registered: {center.name} ({center.referral_code}), awaiting approval")
        return center
