"""Pydantic schemas for profile updates."""

from typing import Optional

from pydantic import BaseModel, Field


class PersonalDetailsUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    mobile_number: Optional[str] = Field(None, max_length=20)
    height: Optional[float] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)


class MeasurementsUpdate(BaseModel):
    chest: Optional[float] = Field(None, ge=0)
    upper_waist: Optional[float] = Field(None, ge=0)
    mid_waist: Optional[float] = Field(None, ge=0)
    lower_waist: Optional[float] = Field(None, ge=0)
    right_thigh: Optional[float] = Field(None, ge=0)
    left_thigh: Optional[float] = Field(None, ge=0)
    right_arm: Optional[float] = Field(None, ge=0)
    left_arm: Optional[float] = Field(None, ge=0)


class BCAUpdate(BaseModel):
    weight: Optional[float] = Field(None, ge=0)
    bmi: Optional[float] = Field(None, ge=0)
    body_fat: Optional[float] = Field(None, ge=0, le=100)
    muscle_rate: Optional[float] = Field(None, ge=0, le=100)
    subcutaneous_fat: Optional[float] = Field(None, ge=0, le=100)
    visceral_fat: Optional[float] = Field(None, ge=0)
    body_age: Optional[int] = Field(None, ge=0)
    bmr: Optional[float] = Field(None, ge=0)
    skeletal_mass: Optional[float] = Field(None, ge=0)
    muscle_mass: Optional[float] = Field(None, ge=0)
    bone_mass: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0, le=100)


class FullProfileUpdate(BaseModel):
    personal_details: Optional[PersonalDetailsUpdate] = None
    measurements: Optional[MeasurementsUpdate] = None
    bca: Optional[BCAUpdate] = None
