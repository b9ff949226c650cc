"""Pydantic schemas for user registration API."""

from typing import Optional

from pydantic import BaseModel


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True
