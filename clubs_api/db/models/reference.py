from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Numeric, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubs_api.db.base import Base, RowVersionMixin


class Country(Base):
    """Country reference data (read-only for this service)."""
    __tablename__ = "countries"

    country_code: Mapped[str] = mapped_column(Text, primary_key=True)  # e.g., CA, US
    name: Mapped[str] = mapped_column(Text, nullable=False)

    provinces: Mapped[List["Province"]] = relationship(back_populates="country")


class Province(RowVersionMixin, Base):
    """Province/state within a country, with its sales tax setup."""
    __tablename__ = "provinces"

    province_code: Mapped[str] = mapped_column(Text, primary_key=True)  # e.g., ON, QC
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    country_code: Mapped[str] = mapped_column(
        Text, ForeignKey("countries.country_code", ondelete="RESTRICT"), nullable=False, index=True
    )
    sales_tax_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # e.g., HST, PST
    sales_tax: Mapped[Optional[float]] = mapped_column(Numeric(9, 5, asdecimal=False), nullable=True)
    includes_federal_tax: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    first_postal_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    country: Mapped[Country] = relationship(back_populates="provinces")


class Style(RowVersionMixin, Base):
    """Product/item style, keyed by its name."""
    __tablename__ = "styles"

    style_name: Mapped[str] = mapped_column(Text, primary_key=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
