import uuid
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

from campuseats.models.auth import Role


class View(str, Enum):
    ADMIN = "admin"
    RESTAURANT_PARTNER = "restaurant_partner"
    DELIVERY_PARTNER = "delivery_partner"
    CUSTOMER = "customer"
    AUTH = "auth"  # Sign-in / onboarding flow


class ViewDecision(BaseModel):
    """Which dashboard the client should render for the signed-in user."""
    view: View
    delivery_toggle: bool = Field(False, description="Customer view may switch into delivery mode.")
    roles: List[Role] = Field(default_factory=list)


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    confirm_password: str

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("Please enter a valid email address")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SignInRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str


class SignInResponse(BaseModel):
    token: str
    user: UserResponse
