"""Request and response schemas for the company registry endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.models import AutocompleteSuggestion


class CompanyLookupRequest(BaseModel):
    """Body of the search and autocomplete endpoints.

    At least one of ``company_name`` or ``company_number`` must be non-blank;
    the router enforces this so it can answer with a 400 and an example body.
    """

    jurisdiction_code: Optional[str] = Field(default=None, max_length=8)
    company_name: Optional[str] = Field(default=None, max_length=500)
    company_number: Optional[str] = Field(default=None, max_length=100)

    @property
    def query(self) -> str:
        return (self.company_name or self.company_number or "").strip()


class CompleteInfoRequest(BaseModel):
    """Body of the company detail endpoint."""

    jurisdiction_code: Optional[str] = Field(default=None, max_length=8)
    url: Optional[str] = Field(default=None, max_length=2000)


class CompanySearchResult(BaseModel):
    jurisdiction_code: str
    company_name: str
    company_number: str = ""
    address: str = ""
    status: str = ""
    url: str = ""


class AutocompleteResponse(BaseModel):
    jurisdiction_code: str
    query: str
    suggestions: list[AutocompleteSuggestion] = Field(default_factory=list)
