"""
Pydantic models for the license availability probe.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone


class EndpointStatus(BaseModel):
    name: str                           # human label, e.g. "Planet Prediction (Mars)"
    operation: str                      # endpoints.OPERATIONS key
    path: str
    accessible: bool
    outcome: str = "accessible"         # accessible | license | unauthorized | forbidden | not_found | rejected | error
    status_code: Optional[int] = None
    message: Optional[str] = None
    url: Optional[str] = None
    response_body: Optional[str] = None


class AvailabilityReport(BaseModel):
    base_url: str
    results: List[EndpointStatus] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def accessible(self) -> List[EndpointStatus]:
        return sorted((r for r in self.results if r.accessible), key=lambda r: r.name)

    @property
    def not_accessible(self) -> List[EndpointStatus]:
        return sorted((r for r in self.results if not r.accessible), key=lambda r: r.name)
