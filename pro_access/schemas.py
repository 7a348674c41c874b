"""
Pydantic schemas for the Pro access API.

Response models for the read-only gate endpoints.
"""

from typing import Dict, List, Optional
from datetime import datetime

from pydantic import BaseModel, Field


class ActionDecisionResponse(BaseModel):
    """Response model for one gated action decision."""

    action: Optional[str] = Field(None, description="Action kind, null for the generic check")
    allowed: bool = Field(..., description="Whether the tenant may perform the action")
    message: str = Field("", description="Denial message, empty when allowed")
    show_upgrade_prompt: bool = Field(..., description="Whether the UI should open the upgrade prompt")


class ProAccessResponse(BaseModel):
    """Response model for the tenant's Pro access summary."""

    tenant_id: str = Field(..., description="Tenant (vendor) identifier")
    is_pro: bool = Field(..., description="Subscription active and payment completed")
    is_free: bool = Field(..., description="Inverse of is_pro")
    status: Optional[str] = Field(None, description="Subscription status")
    payment_status: Optional[str] = Field(None, description="Payment status")
    plan_id: Optional[str] = Field(None, description="Subscribed plan identifier")
    current_period_end: Optional[datetime] = Field(None, description="End of current billing period")
    actions: Dict[str, ActionDecisionResponse] = Field(..., description="Decision per action kind")


class UpgradePromptResponse(BaseModel):
    """Response model for the upgrade prompt content."""

    action: Optional[str] = Field(None, description="Action that triggered the prompt")
    title: str = Field(..., description="Prompt title")
    headline: str = Field(..., description="Action-specific headline")
    benefits: List[str] = Field(..., description="Pro plan benefits")
    offer_label: str = Field(..., description="Offer caption")
    price_label: str = Field(..., description="Displayed price")
    upgrade_label: str = Field(..., description="Upgrade button label")
    dismiss_label: str = Field(..., description="Dismiss button label")
    upgrade_route: str = Field(..., description="Route the upgrade button navigates to")
