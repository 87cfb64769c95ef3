from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class PolicyClickRequest(BaseModel):
    """Schema for recording a policy card click"""
    policy_id: Optional[int] = Field(None, alias="policyId", description="Content id of the policy card")
    policy_title: Optional[str] = Field(None, alias="policyTitle", description="Title shown on the card")

    class Config:
        populate_by_name = True


class PolicyClickCountResponse(BaseModel):
    """Schema for aggregated click counts"""
    policy_id: int = Field(..., alias="policyId")
    policy_title: str = Field(..., alias="policyTitle")
    click_count: int = Field(..., alias="clickCount")
    first_clicked: datetime = Field(..., alias="firstClicked")
    last_clicked: datetime = Field(..., alias="lastClicked")

    class Config:
        from_attributes = True
        populate_by_name = True


class MessageResponse(BaseModel):
    success: bool
    message: str
