"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request to shorten a URL.

    Fields are checked by the service so that every rejection carries the
    same error body; only JSON types are enforced here.
    """

    url: Optional[str] = Field(None, description="The URL to shorten")
    validity: Optional[StrictInt] = Field(None, description="Validity in minutes (default 30)")
    shortcode: Optional[str] = Field(None, description="Optional custom short code")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity": 30,
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity": 120,
                    "shortcode": "myrepo",
                },
            ]
        },
    )


class ShortenResponse(CamelModel):
    """Response after shortening a URL."""

    short_link: str = Field(..., description="The complete short URL")
    expiry: datetime = Field(..., description="Expiry timestamp")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shortLink": "https://short.link/abc123",
                    "expiry": "2024-01-01T12:30:00Z",
                }
            ]
        },
    )


class LocationInfo(BaseModel):
    """Approximate click location."""

    country: str
    region: str
    city: str


class ClickDetail(CamelModel):
    """One recorded click."""

    timestamp: datetime
    referrer: str
    location: LocationInfo
    user_agent: str


class URLStatsResponse(CamelModel):
    """Response with URL information and click analytics."""

    shortcode: str
    original_url: str
    created_at: datetime
    expiry_date: datetime
    is_active: bool
    total_clicks: int
    click_details: List[ClickDetail]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    timestamp: datetime = Field(..., description="Check timestamp")
    service: str = Field(..., description="Service name")


class ServiceInfoResponse(BaseModel):
    """Root endpoint response."""

    service: str
    version: str
    status: str
    timestamp: datetime
    endpoints: Dict[str, str]


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = Field(False, description="Always false")
    timestamp: datetime = Field(..., description="Error timestamp")
    message: str = Field(..., description="Error message")
    errors: List[str] = Field(default_factory=list, description="Detailed error information")
    path: Optional[str] = Field(None, description="Request path for unknown routes")


class StatisticsResponse(CamelModel):
    """Statistics response."""

    total_urls: int
    active_urls: int
    total_clicks: int


class URLSummary(CamelModel):
    """One row of the development URL listing."""

    shortcode: str
    original_url: str
    created_at: datetime
    expiry_date: datetime
    total_clicks: int
    last_clicked: Optional[datetime] = None
