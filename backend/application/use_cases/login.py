"""Account use cases: register and login"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from domain.entities.user import UserEntity
from domain.exceptions import InvalidCredentialsError, AccountDisabledError, EmailAlreadyRegisteredError
from application.ports.user_repository import UserRepository


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class LoginOutput:
    user_id: int
    email: str
    name: str
    role: str
    subscription_plan: str


@dataclass
class RegisterInput:
    email: str
    password: str
    name: str
    phone: Optional[str] = None
    city: Optional[str] = None


class LoginUseCase:
    def __init__(self, user_repo: UserRepository, verify_password_fn):
        self._user_repo = user_repo
        self._verify_password = verify_password_fn

    async def execute(self, input: LoginInput) -> LoginOutput:
        user = await self._user_repo.get_by_email(input.email)
        if user is None:
            raise InvalidCredentialsError()
        if not self._verify_password(input.password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError()
        await self._user_repo.update_last_login(user.id)
        return LoginOutput(user_id=user.id, email=user.email, name=user.name,
                           role=user.role, subscription_plan=user.subscription_plan)


class RegisterUseCase:
    def __init__(self, user_repo: UserRepository, hash_password_fn):
        self._user_repo = user_repo
        self._hash_password = hash_password_fn

    async def execute(self, input: RegisterInput) -> UserEntity:
        if await self._user_repo.get_by_email(input.email):
            raise EmailAlreadyRegisteredError()
        user = await self._user_repo.create(
            email=input.email, password_hash=self._hash_password(input.password),
            name=input.name, phone=input.phone, city=input.city)
        logger.info(f"New account: {user.email}")
        return user
