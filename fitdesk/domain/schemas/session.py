"""Pydantic schemas for training sessions."""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from fitdesk.domain.models.session import SessionStatus


class SessionCreate(BaseModel):
    person_count: Literal[1, 2]
    starting_time: datetime.time
    date: datetime.date
    users: list[int] = Field(default_factory=list)
    trainer_id: Optional[int] = None
    end_time: Optional[datetime.time] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_capacity(self):
        if len(self.users) > self.person_count:
            raise ValueError(f"Cannot add more than {self.person_count} user(s) to this session")
        if len(set(self.users)) != len(self.users):
            raise ValueError("Duplicate user IDs in session")
        return self


class SessionUpdate(BaseModel):
    person_count: Optional[Literal[1, 2]] = None
    starting_time: Optional[datetime.time] = None
    date: Optional[datetime.date] = None
    users: Optional[list[int]] = None
    trainer_id: Optional[int] = None
    end_time: Optional[datetime.time] = None
    notes: Optional[str] = None


class SessionParticipant(BaseModel):
    user_id: int


class SessionStatusUpdate(BaseModel):
    status: SessionStatus


class SessionFilter(BaseModel):
    date: Optional[datetime.date] = None
    status: Optional[SessionStatus] = None
    trainer_id: Optional[int] = None
    upcoming: bool = False


class SessionRead(BaseModel):
    id: int
    session_id: str
    person_count: int
    starting_time: datetime.time
    date: datetime.date
    users: list[int]
    status: SessionStatus
    end_time: Optional[datetime.time] = None
    trainer_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    model_config = {"from_attributes": True}
