"""Enquiry repository"""
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.enquiry_repository import EnquiryRepository
from infrastructure.persistence.models.enquiry import Enquiry


class SqlEnquiryRepository(EnquiryRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, name: str, email: str, phone: str, preferred_district: str) -> int:
        enquiry = Enquiry(name=name, email=email, phone=phone, preferred_district=preferred_district)
        self._session.add(enquiry)
        await self._session.flush()
        return enquiry.id
