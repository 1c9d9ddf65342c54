"""Erasmus Journey — Normalized Facts Extracted From Submission Blobs.

Every field is Optional: ``None`` means "the blob did not provide a usable
value" and is excluded from statistics, never treated as zero.
"""

from typing import Optional
from pydantic import BaseModel


class BasicInfoFacts(BaseModel):
    host_city: Optional[str] = None
    host_country: Optional[str] = None
    host_university: Optional[str] = None
    host_department: Optional[str] = None
    nationality: Optional[str] = None
    home_country: Optional[str] = None
    study_level: Optional[str] = None


class AccommodationFacts(BaseModel):
    accommodation_type: Optional[str] = None
    monthly_rent: Optional[float] = None
    accommodation_rating: Optional[float] = None
    description: Optional[str] = None


class CourseFacts(BaseModel):
    host_university: Optional[str] = None
    host_department: Optional[str] = None
    host_course_count: Optional[int] = None
    difficulty: Optional[str] = None


class LivingExpenseFacts(BaseModel):
    rent: Optional[float] = None
    food: Optional[float] = None
    transport: Optional[float] = None
    entertainment: Optional[float] = None
    total_monthly_budget: Optional[float] = None


class ExperienceFacts(BaseModel):
    overall_rating: Optional[float] = None
    advice: Optional[str] = None


class GenericFacts(BaseModel):
    """Types the engine links but does not aggregate (story, quick-tip, ...)."""

    text: Optional[str] = None
