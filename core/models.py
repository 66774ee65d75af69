"""
Data models for one discovery: the request, decoded server errors and
the terminal result. Everything here lives for a single resolve call.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DiscoveryRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    email_address: str
    username: str
    password: str = Field(repr=False)

    @property
    def domain(self) -> str:
        # everything after the last "@"; no further normalisation
        return self.email_address.rsplit("@", 1)[-1]


class ServerError(BaseModel):
    error_code: str = ""
    message: str = ""


class DiscoveryResult(BaseModel):
    email_address: str
    domain: str
    url: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    attempts: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_exactly_one(self) -> "DiscoveryResult":
        if (self.url is None) == (self.error is None):
            raise ValueError("exactly one of url or error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.url is not None
