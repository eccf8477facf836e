"""Enquiry repository interface"""
from abc import ABC, abstractmethod


class EnquiryRepository(ABC):
    @abstractmethod
    async def create(self, name: str, email: str, phone: str, preferred_district: str) -> int: ...
