"""
Authenticated caller.
"""

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """Identity carried by a verified access token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias="userId")
    email: str
    role: str
    organization_id: str = Field(..., alias="organizationId")
