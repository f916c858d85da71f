"""
Pydantic schemas for staff and login requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class StaffBase(BaseModel):
    """Common staff fields."""
    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    store: str = Field(..., min_length=1, max_length=26, description="Home store ID")

    model_config = ConfigDict(str_strip_whitespace=True)


class StaffCreate(StaffBase):
    """Schema for creating an employee or a manager."""
    password: str = Field(..., min_length=1, max_length=128)


class StaffUpdate(StaffBase):
    """Schema for updating an employee or a manager. Password is kept when omitted."""
    password: str | None = Field(None, min_length=1, max_length=128)


class StaffResponse(BaseModel):
    """Staff member as returned by the API. Never includes the password hash."""
    id: str
    name: str
    username: str
    role_id: str
    store_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    user: StaffResponse
    token: str
    token_type: str = "bearer"
