from __future__ import annotations

from pydantic import BaseModel, Field


class EndpointHeight(BaseModel):
    url: str = Field(..., description="Endpoint address as configured")
    number: str = Field(..., description="Latest block number as reported (hex)")


class ComparisonResult(BaseModel):
    difference: str = Field(..., description="Absolute height difference (decimal)")
    threshold: str = Field(..., description="Maximum tolerated difference (decimal)")
    endpoints: list[EndpointHeight]


class ErrorResponse(BaseModel):
    error: str
