from __future__ import annotations

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

# Decimal places stored by the provinces.sales_tax column
SALES_TAX_DECIMALS = 5

# Path segment of the country listing route; cannot double as a province code
RESERVED_PROVINCE_CODES = frozenset({"country"})


def _strip(v):
    return v.strip() if isinstance(v, str) else v


# Text input with surrounding whitespace removed before validation
StrippedStr = Annotated[str, BeforeValidator(_strip)]


class CountryRead(BaseModel):
    """Country read model."""
    model_config = ConfigDict(from_attributes=True)

    country_code: str = Field(..., description="Country code")
    name: str = Field(..., description="Country name")


class CountryIndex(BaseModel):
    """Country listing, with any pending advisory message for the client."""
    message: Optional[str] = Field(None, description="One-shot advisory message, e.g. after a redirect")
    countries: List[CountryRead] = Field(default_factory=list)


class ProvinceBase(BaseModel):
    province_code: StrippedStr = Field(..., min_length=1, max_length=10, description="Province code (unique)")
    name: StrippedStr = Field(..., min_length=1, max_length=100, description="Province name (unique)")
    country_code: StrippedStr = Field(..., min_length=1, max_length=10, description="Owning country code")
    sales_tax_code: Optional[StrippedStr] = Field(None, max_length=10)
    sales_tax: Optional[float] = Field(None, ge=0, description="Sales tax rate")
    includes_federal_tax: bool = Field(False)
    first_postal_letter: Optional[StrippedStr] = Field(None, max_length=10)

    @field_validator("sales_tax")
    @classmethod
    def _check_sales_tax_precision(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and round(v, SALES_TAX_DECIMALS) != v:
            raise ValueError(f"sales_tax allows at most {SALES_TAX_DECIMALS} decimal places")
        return v


class ProvinceCreate(ProvinceBase):
    """Create province payload."""

    @field_validator("province_code")
    @classmethod
    def _check_reserved_code(cls, v: str) -> str:
        if v in RESERVED_PROVINCE_CODES:
            raise ValueError(f"'{v}' is reserved and cannot be used as a province code")
        return v


class ProvinceUpdate(ProvinceBase):
    """
    Update province payload.

    province_code must equal the code in the request path. row_version, when
    sent, is the version the client read; the update fails if it moved on.
    """
    row_version: Optional[int] = Field(None, ge=1, description="Version the client last read")


class ProvinceRead(ProvinceBase):
    """Province read model, joined with its country."""
    model_config = ConfigDict(from_attributes=True)

    row_version: int = Field(..., description="Optimistic-concurrency version")
    country: Optional[CountryRead] = Field(None)


class ProvinceListing(BaseModel):
    """Provinces of the resolved country, ordered by name."""
    country_code: str = Field(..., description="Resolved country code")
    country_name: Optional[str] = Field(None, description="Resolved country name, when known")
    source: Literal["path", "query", "session"] = Field(..., description="Where the country came from")
    provinces: List[ProvinceRead] = Field(default_factory=list)


class StyleBase(BaseModel):
    style_name: StrippedStr = Field(..., min_length=1, max_length=50, description="Style name (unique)")
    description: Optional[StrippedStr] = Field(None, max_length=500)


class StyleCreate(StyleBase):
    """Create style payload."""


class StyleUpdate(StyleBase):
    """Update style payload; style_name must equal the name in the request path."""
    row_version: Optional[int] = Field(None, ge=1, description="Version the client last read")


class StyleRead(StyleBase):
    """Style read model."""
    model_config = ConfigDict(from_attributes=True)

    row_version: int = Field(..., description="Optimistic-concurrency version")
