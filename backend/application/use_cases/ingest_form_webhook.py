"""Typeform enquiry webhook use case"""
import hmac
from typing import Optional, List, Dict, Any

from loguru import logger

from domain.exceptions import WebhookSignatureError, MissingFieldsError, PersistenceError
from application.ports.enquiry_repository import EnquiryRepository
from application.ports.unit_of_work import UnitOfWork

# enquiry column -> (question ref, answer key)
ENQUIRY_FIELDS = {
    "name": ("name", "text"),
    "email": ("email", "email"),
    "phone": ("phone", "phone_number"),
    "preferred_district": ("district", "text"),
}


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def find_answer(answers: List[Dict[str, Any]], ref: str, key: str) -> Optional[str]:
    """Text under ``key`` of the first answer whose ``field.ref`` is ``ref``"""
    for answer in answers:
        if not isinstance(answer, dict):
            continue
        if as_dict(answer.get("field")).get("ref") == ref:
            value = answer.get(key)
            return value if isinstance(value, str) and value else None
    return None


class IngestFormWebhookUseCase:
    def __init__(self, enquiry_repo: EnquiryRepository, uow: UnitOfWork, secret: Optional[str] = None):
        self._enquiry_repo = enquiry_repo
        self._uow = uow
        self._secret = secret

    def check_signature(self, header: Optional[str]) -> None:
        if not self._secret:
            return
        if not header or not hmac.compare_digest(header, f"sha256={self._secret}"):
            raise WebhookSignatureError("Unauthorized")

    def extract(self, payload: Dict[str, Any]) -> Dict[str, str]:
        answers = as_dict(as_dict(payload).get("form_response")).get("answers")
        if not isinstance(answers, list):
            answers = []
        values = {column: find_answer(answers, ref, key) for column, (ref, key) in ENQUIRY_FIELDS.items()}
        missing = [ENQUIRY_FIELDS[column][0] for column, value in values.items() if not value]
        if missing:
            raise MissingFieldsError(missing)
        return values

    async def execute(self, payload: Dict[str, Any], signature: Optional[str]) -> int:
        self.check_signature(signature)
        values = self.extract(payload)
        try:
            enquiry_id = await self._enquiry_repo.create(**values)
            await self._uow.commit()
        except Exception as e:
            await self._uow.rollback()
            logger.error(f"Enquiry insert failed: {e}")
            raise PersistenceError(f"Failed to save enquiry: {e}") from e
        logger.info(f"Enquiry {enquiry_id} saved from {values['email']}")
        return enquiry_id
