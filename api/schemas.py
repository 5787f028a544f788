# api/schemas.py

from typing import Optional
from pydantic import BaseModel


class RevChangeSchema(BaseModel):
    old: str
    new: str
    changed: bool


class WebhookResponse(BaseModel):
    event: str
    message: str
    notified: bool
    notify_error: Optional[str] = None
    rev_change: Optional[RevChangeSchema] = None


class RevResponse(BaseModel):
    input: str
    rev: str


class RevUpdateRequest(BaseModel):
    rev: str
