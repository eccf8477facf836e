"""Shared response envelopes"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel


class ResponseBase(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response"""
    detail: str
    errors: Optional[List[Dict[str, Any]]] = None
