"""Pydantic schemas for User, OTP login and tokens."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INDIAN_PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")


def clean_phone_number(value: str) -> str:
    return re.sub(r"\D", "", value)


def validate_phone_number(value: str) -> str:
    cleaned = clean_phone_number(value)
    if not INDIAN_PHONE_PATTERN.match(cleaned):
        raise ValueError("Invalid Indian phone number")
    return cleaned


class OTPLoginRequest(BaseModel):
    """Email or phone; email wins when both are given."""
    email: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @model_validator(mode="after")
    def check_identifier(self):
        if not self.email and not self.phone_number:
            raise ValueError("Email or phone number is required")
        if not self.email:
            self.phone_number = validate_phone_number(self.phone_number)
        return self

    @property
    def identifier(self) -> str:
        return self.email or self.phone_number

    @property
    def identifier_type(self) -> str:
        return "email" if self.email else "phone"


class OTPLoginVerify(OTPLoginRequest):
    otp: str = Field(min_length=1, max_length=10)

    # Clients often send the code as a JSON number
    model_config = {"coerce_numbers_to_str": True}


class PhoneOTPRequest(BaseModel):
    phone_number: str

    @field_validator("phone_number")
    @classmethod
    def check_phone(cls, value: str) -> str:
        return validate_phone_number(value)


class PhoneOTPVerify(BaseModel):
    phone_number: str
    otp: str = Field(min_length=1, max_length=10)

    model_config = {"coerce_numbers_to_str": True}

    @field_validator("phone_number")
    @classmethod
    def check_phone(cls, value: str) -> str:
        cleaned = clean_phone_number(value)
        if not cleaned:
            raise ValueError("Phone number is required")
        return cleaned


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    id: int
    email: Optional[str] = None
    phone_number: Optional[str] = None
    is_admin: bool
    is_trainer: bool
    name: Optional[str] = None
    mobile_number: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None

    measurements_chest: Optional[float] = None
    measurements_upper_waist: Optional[float] = None
    measurements_mid_waist: Optional[float] = None
    measurements_lower_waist: Optional[float] = None
    measurements_right_thigh: Optional[float] = None
    measurements_left_thigh: Optional[float] = None
    measurements_right_arm: Optional[float] = None
    measurements_left_arm: Optional[float] = None

    bca_weight: Optional[float] = None
    bca_bmi: Optional[float] = None
    bca_body_fat: Optional[float] = None
    bca_muscle_rate: Optional[float] = None
    bca_subcutaneous_fat: Optional[float] = None
    bca_visceral_fat: Optional[float] = None
    bca_body_age: Optional[int] = None
    bca_bmr: Optional[float] = None
    bca_skeletal_mass: Optional[float] = None
    bca_muscle_mass: Optional[float] = None
    bca_bone_mass: Optional[float] = None
    bca_protein: Optional[float] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
