"""Ingestion domain: spreadsheet exports in, validated canonical rows out.

Handles salary and performance exports from several HRIS vendors with
arbitrary header naming, including combined sheets carrying both.
"""

from raiseplanner.domains.ingestion.columns import (
    PERFORMANCE_COLUMN_MAPPINGS,
    SALARY_COLUMN_MAPPINGS,
    map_columns,
)
from raiseplanner.domains.ingestion.detect import detect_file_type, validate_structure
from raiseplanner.domains.ingestion.models import FileUploadResult, ValidationResult
from raiseplanner.domains.ingestion.parser import parse_file, parse_file_sync, parse_path
from raiseplanner.domains.ingestion.rows import validate_performance_row, validate_salary_row
