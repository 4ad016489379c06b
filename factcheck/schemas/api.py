"""Pydantic schemas for API requests."""

from pydantic import BaseModel, Field, field_validator


class CheckRequest(BaseModel):
    """Request body for checking a claim."""
    claim: str = Field(..., description="The claim text to verify")

    @field_validator("claim")
    @classmethod
    def claim_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Claim text must not be empty")
        return v.strip()
