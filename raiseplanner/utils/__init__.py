"""Shared utilities for the raise planner."""

from raiseplanner.utils.formatting import format_currency, format_date, format_months, format_percentage
from raiseplanner.utils.io import decode_rows, write_output
from raiseplanner.utils.types import EmployeeRecord, FileType, MappedRow, RawRow
from raiseplanner.utils.validators import validate_dataframe, validate_unique
