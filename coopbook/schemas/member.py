from pydantic import BaseModel, Field
from typing import Optional
from datetime import date


class MemberCreate(BaseModel):
    """Schema for registering a member."""
    name: str = Field(..., min_length=1, description="Member full name")
    phone: str = Field(..., min_length=1, description="Phone number, unique across members")
    join_date: Optional[date] = Field(None, description="Join date, defaults to today")
    father_name: Optional[str] = Field(None, description="Father's name")
    email: Optional[str] = Field(None, description="Contact email")
    address: Optional[str] = Field(None, description="Postal address")


class MemberUpdate(BaseModel):
    """Schema for editing a member profile."""
    name: Optional[str] = None
    phone: Optional[str] = None
    join_date: Optional[date] = None
    father_name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
