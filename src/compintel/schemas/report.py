"""Pydantic models for the competitive-analysis report.

Every model is frozen and collections are tuples or read-only mappings, so a
report cannot change once hydrated. Nested scalars the model gets wrong
(out-of-range scores, unknown labels) are logged and dropped to ``None``
rather than failing the whole report.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Literal, get_args

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)

logger = logging.getLogger(__name__)

MetaHealth = Literal["Good", "Fair", "Poor"]
Freshness = Literal["High", "Medium", "Low"]

_TRUE_WORDS = {"true", "yes", "y"}
_FALSE_WORDS = {"false", "no", "n"}


def _read_only(value: dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(value)


def _plain_dict(value: Mapping[str, Any]) -> dict[str, Any]:
    return dict(value)


def _frozen_map(value_type: Any) -> Any:
    """``dict[str, value_type]`` that validates into a read-only mapping."""
    return Annotated[
        dict[str, value_type],
        AfterValidator(_read_only),
        PlainSerializer(_plain_dict, return_type=dict[str, value_type]),
    ]


Availability = _frozen_map(bool | str | None)


def number_in_range(v: object, low: float, high: float, field: str) -> float | None:
    """Return ``v`` as a float if it lies in ``[low, high]``, else ``None``."""
    if v is None:
        return None
    if isinstance(v, bool):
        number = math.nan
    else:
        try:
            number = float(v)
        except (TypeError, ValueError):
            number = math.nan
    if not low <= number <= high:
        logger.warning("Discarding %s %r (expected %g to %g)", field, v, low, high)
        return None
    return number


def label_or_none(v: object, allowed: tuple[str, ...], field: str) -> str | None:
    """Case-normalize a label; unknown labels become ``None``."""
    if v is None:
        return None
    label = v.strip().capitalize() if isinstance(v, str) else v
    if label not in allowed:
        logger.warning("Discarding %s %r (expected one of %s)", field, v, ", ".join(allowed))
        return None
    return label


def flag_or_none(v: object, field: str) -> bool | None:
    if v is None or isinstance(v, bool):
        return v
    if isinstance(v, str):
        word = v.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    logger.warning("Discarding %s %r (expected true or false)", field, v)
    return None


class CompanyProfile(BaseModel):
    """Identity card for one analyzed company."""

    model_config = ConfigDict(frozen=True)

    url: str
    name: str = ""
    description: str = ""
    colors: tuple[str, ...] = ()  # brand colors as hex strings


class Feature(BaseModel):
    """One row of the feature matrix."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    name: str
    canonical_feature: str = ""  # normalized bucket, e.g. "SSO"
    confidence: float | None = Field(default=None, ge=0, le=1)
    evidence_snippet: str = ""
    # url -> True/False, or a short qualifier string for partial support
    availability: Availability = {}

    @field_validator("availability", mode="before")
    @classmethod
    def _null_availability(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("confidence", mode="before")
    @classmethod
    def _tolerant_confidence(cls, v: object) -> object:
        return number_in_range(v, 0, 1, "confidence")


class PricingTier(BaseModel):
    """A single published price point."""

    model_config = ConfigDict(frozen=True)

    tier_name: str
    price: str = ""
    billing_cycle: str = ""
    features_included: tuple[str, ...] = ()

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, v: object) -> object:
        """Prices occasionally come back as bare numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class PricingModel(BaseModel):
    """Pricing page summary for one company. Zero tiers means quote-only."""

    model_config = ConfigDict(frozen=True)

    url: str
    has_free_trial: bool | None = None
    currency: str = ""
    tiers: tuple[PricingTier, ...] = ()

    @field_validator("has_free_trial", mode="before")
    @classmethod
    def _tolerant_flag(cls, v: object) -> object:
        return flag_or_none(v, "has_free_trial")


class SeoSignals(BaseModel):
    """Public SEO health signals for one company."""

    model_config = ConfigDict(frozen=True)

    url: str
    page_speed_score: float | None = Field(default=None, ge=0, le=100)
    meta_description_health: MetaHealth | None = None
    schema_types: tuple[str, ...] = ()
    blog_freshness: Freshness | None = None
    mobile_friendly: bool | None = None

    @field_validator("page_speed_score", mode="before")
    @classmethod
    def _tolerant_score(cls, v: object) -> object:
        return number_in_range(v, 0, 100, "page_speed_score")

    @field_validator("meta_description_health", mode="before")
    @classmethod
    def _normalize_meta_health(cls, v: object) -> object:
        return label_or_none(v, get_args(MetaHealth), "meta_description_health")

    @field_validator("blog_freshness", mode="before")
    @classmethod
    def _normalize_freshness(cls, v: object) -> object:
        return label_or_none(v, get_args(Freshness), "blog_freshness")

    @field_validator("mobile_friendly", mode="before")
    @classmethod
    def _tolerant_flag(cls, v: object) -> object:
        return flag_or_none(v, "mobile_friendly")


class Swot(BaseModel):
    """Strengths, weaknesses, opportunities and threats for one company."""

    model_config = ConfigDict(frozen=True)

    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    opportunities: tuple[str, ...] = ()
    threats: tuple[str, ...] = ()


SwotMap = _frozen_map(Swot)


class TechStack(BaseModel):
    """Inferred technology stack for one company."""

    model_config = ConfigDict(frozen=True)

    url: str
    frontend: tuple[str, ...] = ()
    backend: tuple[str, ...] = ()
    analytics: tuple[str, ...] = ()


class Position(BaseModel):
    """Coordinates on the strategic map."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(ge=0, le=100)  # innovation
    y: float = Field(ge=0, le=100)  # market presence


PositionMap = _frozen_map(Position)


class AnalysisReport(BaseModel):
    """The complete, immutable output of one analysis.

    ``primary_url`` and ``competitors`` are the caller's inputs, echoed
    verbatim. Every URL-keyed collection is expected (but not guaranteed)
    to contain an entry per URL in :attr:`all_urls`.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    id: str
    timestamp: str
    primary_url: str = Field(min_length=1)
    competitors: tuple[str, ...] = Field(default=(), max_length=4)

    profiles: tuple[CompanyProfile, ...] = ()
    features: tuple[Feature, ...] = ()
    pricing: tuple[PricingModel, ...] = ()
    seo: tuple[SeoSignals, ...] = ()
    swot: SwotMap = {}
    tech_stacks: tuple[TechStack, ...] = ()
    market_positioning: PositionMap = {}
    summary: str = ""
    recommendations: tuple[str, ...] = ()

    @field_validator("market_positioning", mode="before")
    @classmethod
    def _drop_bad_positions(cls, v: object) -> object:
        """A point with a missing or out-of-range axis is left off the map."""
        if not isinstance(v, Mapping):
            return v
        kept: dict[str, Any] = {}
        for url, pos in v.items():
            if isinstance(pos, Position):
                kept[url] = pos
                continue
            if not isinstance(pos, Mapping):
                logger.warning("Discarding market_positioning for %s: %r", url, pos)
                continue
            x = number_in_range(pos.get("x"), 0, 100, f"market_positioning[{url}].x")
            y = number_in_range(pos.get("y"), 0, 100, f"market_positioning[{url}].y")
            if x is None or y is None:
                continue
            kept[url] = {"x": x, "y": y}
        return kept

    @property
    def all_urls(self) -> list[str]:
        """Primary URL followed by the competitors, in submission order."""
        return [self.primary_url, *self.competitors]
