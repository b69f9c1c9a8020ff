"""Pydantic models for API request bodies."""

from pydantic import BaseModel, ConfigDict, Field


class SurveyAnswersRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    income: str = ""
    savings: str = ""
    location: str = ""
    timeline: str = ""
    housing: str = ""


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SavedAmountRequest(BaseModel):
    amount: float = Field(..., ge=0)


class CommittedTimelineRequest(BaseModel):
    timeline: str
