"""Shoppable listings attached to a feed image."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    """A single secondhand listing; unknown marketplace fields are preserved."""

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    price: Optional[str | float] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    source: Optional[str] = None


class ListingGroup(BaseModel):
    """Listings matched to one garment detected in a feed image."""

    model_config = ConfigDict(extra="ignore")

    item_type: str
    notes: Optional[str] = None
    listings: List[Listing] = Field(default_factory=list)


class ListingsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: List[ListingGroup] = Field(default_factory=list)


__all__ = ["Listing", "ListingGroup", "ListingsResponse"]
