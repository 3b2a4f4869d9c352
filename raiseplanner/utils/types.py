"""Shared type definitions for ingestion, analysis and session state."""

from datetime import date
from enum import StrEnum
from typing import Any


type RawRow = dict[str, str]
type MappedRow = dict[str, Any]
type EmployeeRecord = dict[str, Any]
type SynonymTable = dict[str, str]
type DateLike = str | date | int | float | None


class FileType(StrEnum):
    SALARY = "salary"
    PERFORMANCE = "performance"
    UNKNOWN = "unknown"


class TenureBand(StrEnum):
    NEW = "New (< 1 year)"
    EARLY = "Early (1-3 years)"
    ESTABLISHED = "Established (3-7 years)"
    SENIOR = "Senior (7+ years)"
    UNKNOWN = "Unknown"


class PositionInRange(StrEnum):
    BELOW_MIN = "Below Minimum"
    LOWER_THIRD = "Lower Third"
    MIDDLE_THIRD = "Middle Third"
    UPPER_THIRD = "Upper Third"
    AT_OR_ABOVE_MAX = "At/Above Maximum"


class RiskLevel(StrEnum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Priority(StrEnum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class PerformanceTier(StrEnum):
    TOP = "top"
    STRONG = "strong"
    SOLID = "solid"
    DEVELOPING = "developing"
    LOW = "low"
    UNKNOWN = "unknown"
