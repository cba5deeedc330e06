from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CreateProfileRequest(BaseModel):
    username: str = Field(..., description="Display name, must not be blank")
    email: str = ""

    model_config = ConfigDict(json_schema_extra={
        "example": {"username": "alice", "email": "alice@example.com"}
    })


class AssignRoleRequest(BaseModel):
    role: Role


class WithdrawalRequestBody(BaseModel):
    # Raw JSON value; the workflow rejects anything but a positive int as InvalidAmount.
    amount: Any

    model_config = ConfigDict(json_schema_extra={"example": {"amount": 500}})


class Profile(BaseModel):
    identity: str
    username: str
    email: str
    balance: int = Field(default=0, ge=0)
    registration_time: datetime

    model_config = ConfigDict(from_attributes=True)


class Ad(BaseModel):
    id: int
    title: str
    description: str = ""
    url: str
    duration_seconds: int = Field(..., gt=0)
    reward_amount: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class WatchEvent(BaseModel):
    identity: str
    ad_id: int
    day: date
    watched_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WithdrawalRequest(BaseModel):
    id: UUID
    identity: str
    amount: int = Field(..., gt=0)
    status: WithdrawalStatus
    request_time: datetime
    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    def can_decide(self) -> bool:
        return self.status == WithdrawalStatus.PENDING


class ClaimResponse(BaseModel):
    watch: WatchEvent
    reward_amount: int
    balance: int
    message: str


class WithdrawalResponse(BaseModel):
    request: WithdrawalRequest
    balance: int
    available_balance: int
    message: str


class DashboardStats(BaseModel):
    total_balance: int
    ads_watched_today: int
    total_ads_watched: int


class RoleResponse(BaseModel):
    identity: str
    role: Role
