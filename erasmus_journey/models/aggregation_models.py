"""Erasmus Journey — Aggregation Output Models (Versioned)."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


# ─────────────────────────────────────────────
# FACET SUMMARIES
# ─────────────────────────────────────────────


class ValueRange(BaseModel):
    min: float
    max: float


class NumericStats(BaseModel):
    """Summary of one numeric fact over the submissions that supplied it."""

    average: float
    median: float
    min: float
    max: float
    sample_size: int


class AccommodationSummary(BaseModel):
    total_submissions: int
    accommodation_types: Dict[str, int] = {}
    average_rent: Optional[float] = None
    rent_range: Optional[ValueRange] = None
    rent_sample_size: int = 0
    average_rating: Optional[float] = None
    popular_options: List[tuple[str, int]] = []


class CourseSummary(BaseModel):
    total_submissions: int
    popular_departments: List[tuple[str, int]] = []
    average_course_count: Optional[float] = None
    difficulty_distribution: Dict[str, int] = {}


class LivingExpensesSummary(BaseModel):
    total_submissions: int
    rent: Optional[NumericStats] = None
    food: Optional[NumericStats] = None
    transport: Optional[NumericStats] = None
    entertainment: Optional[NumericStats] = None
    total: Optional[NumericStats] = None


class DemographicsSummary(BaseModel):
    total_students: int
    top_nationalities: List[tuple[str, int]] = []
    top_home_countries: List[tuple[str, int]] = []
    study_level_distribution: Dict[str, int] = {}


class UserExperience(BaseModel):
    """Excerpt of one experience submission, not an aggregate."""

    id: str
    user_id: Optional[str] = None
    title: str = ""
    excerpt: str = ""
    rating: Optional[float] = None
    author_name: str = ""
    created_at: datetime


# ─────────────────────────────────────────────
# COMPOSITE SNAPSHOT — cached on Destination.aggregated_json
# ─────────────────────────────────────────────


class DestinationAggregation(BaseModel):
    """Composite statistics for one destination."""

    schema_version: str = "1.0.0"
    total_submissions: int = 0
    average_rating: Optional[float] = None
    average_cost: Optional[float] = None
    accommodation_data: Optional[AccommodationSummary] = None
    course_data: Optional[CourseSummary] = None
    living_expenses_data: Optional[LivingExpensesSummary] = None
    user_experiences: List[UserExperience] = []
    demographics: Optional[DemographicsSummary] = None


class Contribution(BaseModel):
    """What the linker records for one submission."""

    submission_id: str
    contribution_type: str
    weight: float


class AggregationRun(BaseModel):
    """Orchestrator output: snapshot plus link instructions."""

    aggregation: DestinationAggregation
    contributions: List[Contribution] = []


# ─────────────────────────────────────────────
# ADMIN OVERRIDES & PRESENTATION
# ─────────────────────────────────────────────


class DestinationOverrides(BaseModel):
    """Admin corrections layered over the aggregation at read time."""

    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None
    status: Optional[Literal["draft", "published", "archived"]] = None
    stats_overrides: Dict[str, Any] = {}


class SEOData(BaseModel):
    title: str
    description: str
    keywords: List[str] = []
    meta_image: Optional[str] = None


class DestinationView(BaseModel):
    """What readers see: record fields + aggregation with overrides applied."""

    id: str
    slug: str
    name: str
    city: str
    country: str
    description: str
    image_url: Optional[str] = None
    featured: bool = False
    status: str
    submission_count: int = 0
    last_data_update: Optional[datetime] = None
    aggregated_data: Dict[str, Any] = Field(default_factory=dict)
    seo: Optional[SEOData] = None


class DestinationFilters(BaseModel):
    """Listing options for published destinations."""

    featured: Optional[bool] = None
    country: Optional[str] = None
    order_by: Literal["name", "students", "updated", "rating"] = "students"
    order: Literal["asc", "desc"] = "desc"
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class DestinationListItem(BaseModel):
    id: str
    slug: str
    name: str
    city: str
    country: str
    description: str
    image_url: Optional[str] = None
    featured: bool = False
    submission_count: int = 0
    average_rating: Optional[float] = None
    average_cost: Optional[float] = None
    last_updated: Optional[datetime] = None


class SearchResult(BaseModel):
    type: str  # "destination" | "accommodation" | "exchange"
    id: str
    title: str
    subtitle: str = ""
    relevance: int = 0
    data: Dict[str, Any] = Field(default_factory=dict)
