"""Sizing and style catalogs used by the style and sizing steps.

Size categories differ per sizing gender: men's sizing covers tops, bottoms,
outerwear, footwear, tailoring and accessories; women's sizing covers tops,
bottoms, outerwear and dresses. Each category is independently optional and
empty by default.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List

BRAND_OPTIONS = ["Levi’s", "Nike", "Zara", "COS", "Everlane", "Arket", "Vintage", "Designer"]
FABRIC_OPTIONS = ["Denim", "Cotton", "Linen", "Wool", "Leather", "Silk", "Fleece"]
AESTHETIC_OPTIONS = [
    "Minimal",
    "Streetwear",
    "Y2K",
    "Vintage",
    "Clean classics",
    "Techwear",
    "Soft grunge",
]

_MENS_ALPHA = ["XXS/40", "XS/42", "S/44-46", "M/48-50", "L/52-54", "XL/56", "XXL/58"]
_WOMENS_ALPHA = [
    "XXS/00/34",
    "XS/0-2/36-38",
    "S/4/40",
    "M/6-8/42-44",
    "L/10/46",
    "XL/12-14/48-50",
    "XXL/16-18/52-54",
    "3XL/20-22",
    "4XL/24-26",
    "OS",
]

MENS_SIZE_OPTIONS: Dict[str, List[str]] = {
    "tops": _MENS_ALPHA,
    "bottoms": [str(waist) for waist in range(26, 45)],
    "outerwear": _MENS_ALPHA,
    "footwear": [
        "5", "5.5", "6", "6.5", "7", "7.5", "8", "8.5", "9", "9.5",
        "10", "10.5", "11", "11.5", "12", "12.5", "13", "14", "15",
    ],
    "tailoring": [
        f"{chest}{length}"
        for chest in range(34, 56, 2)
        for length in ("S", "R", "L")
        if not (chest in (34, 36) and length == "L")
        and not (chest == 54 and length == "S")
    ],
    "accessories": ["OS", "26", "28", "30", "32", "34", "36", "38", "40", "42", "44", "46"],
}

WOMENS_SIZE_OPTIONS: Dict[str, List[str]] = {
    "tops": _WOMENS_ALPHA,
    "bottoms": [
        "22", "23", "24/00/34", "25/0/36", "26/2/38", "27/4/40", "28/6/42", "29",
        "30/8/44", "31", "32/10/46", "33", "34/12/48", "35", "36/14/50", "37",
        "38/16/52", "39", "40/18", "41", "42/20",
    ],
    "outerwear": _WOMENS_ALPHA,
    "dresses": _WOMENS_ALPHA,
}


class SizingGender(str, Enum):
    """Which size grid is active; values are the wire representation."""

    MENS = "mens"
    WOMENS = "womens"

    @property
    def label(self) -> str:
        return "Men's" if self is SizingGender.MENS else "Women's"

    @classmethod
    def from_api(cls, value: str | None) -> "SizingGender":
        """Parse the API value, falling back to men's sizing for unknown input."""

        if value == cls.WOMENS.value:
            return cls.WOMENS
        return cls.MENS


@dataclass
class MensSizes:
    tops: str = ""
    bottoms: str = ""
    outerwear: str = ""
    footwear: str = ""
    tailoring: str = ""
    accessories: str = ""

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class WomensSizes:
    tops: str = ""
    bottoms: str = ""
    outerwear: str = ""
    dresses: str = ""

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


def size_options(gender: SizingGender) -> Dict[str, List[str]]:
    return MENS_SIZE_OPTIONS if gender is SizingGender.MENS else WOMENS_SIZE_OPTIONS


def validate_size(gender: SizingGender, category: str, value: str) -> str:
    """Validate a size choice for the active grid; an empty value clears it."""

    options = size_options(gender)
    key = category.strip().lower()
    if key not in options:
        raise ValueError(f"Unknown {gender.value} size category: {category}")
    if value and value not in options[key]:
        raise ValueError(f"Unsupported {key} size '{value}' for {gender.label} sizing")
    return key


__all__ = [
    "AESTHETIC_OPTIONS",
    "BRAND_OPTIONS",
    "FABRIC_OPTIONS",
    "MENS_SIZE_OPTIONS",
    "WOMENS_SIZE_OPTIONS",
    "MensSizes",
    "SizingGender",
    "WomensSizes",
    "size_options",
    "validate_size",
]
