"""Ingestion pipeline: decode -> detect -> map -> validate -> merge -> filter.

``parse_file`` always returns a ``FileUploadResult``; every failure mode is
converted into error messages on a zero-row result.
"""

import asyncio
import logging
from pathlib import Path

from raiseplanner.config import IngestionConfig
from raiseplanner.domains.ingestion.columns import (
    COMBINED_PERFORMANCE_FIELDS,
    PERFORMANCE_COLUMN_MAPPINGS,
    SALARY_COLUMN_MAPPINGS,
    map_columns,
)
from raiseplanner.domains.ingestion.detect import collect_headers, validate_structure
from raiseplanner.domains.ingestion.models import (
    DecodeError,
    FileRejected,
    FileUploadResult,
    MappingFailure,
    StructureValidation,
    ValidationResult,
)
from raiseplanner.domains.ingestion.rows import is_blank, validate_rows, validity_rate
from raiseplanner.utils.io import decode_rows, file_extension
from raiseplanner.utils.types import FileType, MappedRow, RawRow

logger = logging.getLogger(__name__)

CRITICAL_GUIDANCE = [
    "Please check your file format and try again. Supported formats: CSV, XLSX, XLS",
    "Ensure your file contains the required columns: employeeId, name, and relevant data fields",
]

type MappingOutcome = tuple[FileType, list[MappedRow], list[ValidationResult]]


def check_file(file_name: str, content: bytes, config: IngestionConfig) -> None:
    """Reject files by extension and size before any decoding."""
    extension = file_extension(file_name)
    if extension not in config.supported_extensions:
        raise FileRejected([f"Unsupported file type: {extension}. Please use CSV, XLSX, or XLS files."])

    size = len(content)
    if size == 0:
        raise FileRejected(["File is empty"])
    if size > config.max_file_size_bytes:
        limit_mb = config.max_file_size_bytes / (1024 * 1024)
        raise FileRejected([
            f"File is too large ({size / (1024 * 1024):.1f} MB). Maximum size is {limit_mb:.0f} MB."
        ])
    if size > config.large_file_warning_bytes:
        logger.warning("%s is large (%d bytes); processing may take longer", file_name, size)


def decode(file_name: str, content: bytes, config: IngestionConfig) -> list[RawRow]:
    """Decode bytes into raw rows; any reader failure becomes a ``DecodeError``."""
    try:
        return decode_rows(file_name, content, config.csv_encodings)
    except Exception as exc:
        raise DecodeError(str(exc) or type(exc).__name__) from exc


def has_performance_headers(rows: list[RawRow]) -> bool:
    return any("performance" in h or "rating" in h for h in collect_headers(rows))


def merge_performance_fields(salary_rows: list[MappedRow], performance_rows: list[MappedRow]) -> None:
    """Copy performance fields onto salary rows with the same index, in place.

    Both lists must come from mapping the same raw rows in the same order;
    rows are paired by position, not by employee ID. If mapping ever starts
    dropping rows for one schema only, this pairing silently misaligns.
    """
    if len(salary_rows) != len(performance_rows):
        raise MappingFailure(
            f"combined export mappings are misaligned ({len(salary_rows)} salary rows, "
            f"{len(performance_rows)} performance rows)"
        )

    for salary_row, performance_row in zip(salary_rows, performance_rows):
        for field in COMBINED_PERFORMANCE_FIELDS:
            value = performance_row.get(field)
            if not is_blank(value):
                salary_row[field] = value


def map_salary_rows(rows: list[RawRow]) -> list[MappedRow]:
    salary_rows = map_columns(rows, SALARY_COLUMN_MAPPINGS)
    if has_performance_headers(rows):
        logger.info("Combined salary and performance export detected")
        merge_performance_fields(salary_rows, map_columns(rows, PERFORMANCE_COLUMN_MAPPINGS))
    return salary_rows


def map_and_validate(rows: list[RawRow], expected_type: FileType) -> MappingOutcome:
    """Map rows with the schema for ``expected_type``.

    For an unknown type both schemas are tried and the one with the higher
    share of valid rows wins; salary wins ties.
    """
    match expected_type:
        case FileType.SALARY:
            mapped = map_salary_rows(rows)
            return FileType.SALARY, mapped, validate_rows(mapped, FileType.SALARY)
        case FileType.PERFORMANCE:
            mapped = map_columns(rows, PERFORMANCE_COLUMN_MAPPINGS)
            return FileType.PERFORMANCE, mapped, validate_rows(mapped, FileType.PERFORMANCE)
        case _:
            salary = map_salary_rows(rows)
            salary_results = validate_rows(salary, FileType.SALARY)
            performance = map_columns(rows, PERFORMANCE_COLUMN_MAPPINGS)
            performance_results = validate_rows(performance, FileType.PERFORMANCE)

            salary_rate = validity_rate(salary_results)
            performance_rate = validity_rate(performance_results)
            logger.debug("Validity: salary %.2f, performance %.2f", salary_rate, performance_rate)
            if performance_rate > salary_rate:
                return FileType.PERFORMANCE, performance, performance_results
            return FileType.SALARY, salary, salary_results


def build_result(
    file_name: str,
    file_type: FileType,
    rows: list[RawRow],
    mapped: list[MappedRow],
    results: list[ValidationResult],
    structure: StructureValidation,
) -> FileUploadResult:
    errors: list[str] = []
    warnings: list[str] = []

    # Row numbers are 1-indexed and offset by the header line
    for index, result in enumerate(results):
        if not result.is_valid:
            errors.extend(f"Row {index + 2}: {message}" for message in result.errors)
        warnings.extend(f"Row {index + 2}: {message}" for message in result.warnings)

    warnings.extend(f"Data structure: {message}" for message in structure.warnings)

    data = [row for row, result in zip(mapped, results) if result.is_valid]
    logger.info(
        "%s: %d of %d rows valid as %s (%d errors, %d warnings)",
        file_name,
        len(data),
        len(rows),
        file_type,
        len(errors),
        len(warnings),
    )
    return FileUploadResult(
        file_name=file_name,
        file_type=file_type,
        row_count=len(rows),
        valid_rows=len(data),
        errors=errors + [f"Warning: {message}" for message in warnings],
        data=data,
    )


async def parse_file(
    file_name: str,
    content: bytes,
    expected_type: FileType | str = FileType.UNKNOWN,
    config: IngestionConfig | None = None,
) -> FileUploadResult:
    """Ingest one uploaded export into validated canonical rows."""
    config = config or IngestionConfig()
    try:
        expected_type = FileType(expected_type)

        try:
            check_file(file_name, content, config)
        except FileRejected as exc:
            logger.info("%s rejected: %s", file_name, exc)
            return FileUploadResult.rejected(file_name, exc.messages)

        try:
            rows = await asyncio.to_thread(decode, file_name, content, config)
        except DecodeError as exc:
            logger.warning("%s could not be decoded: %s", file_name, exc)
            return FileUploadResult.rejected(file_name, [f"Failed to parse file: {exc}"])

        structure = validate_structure(rows, file_name)
        if not structure.is_valid:
            return FileUploadResult.rejected(
                file_name,
                structure.errors + [f"Warning: {message}" for message in structure.warnings],
                file_type=structure.detected_format,
                row_count=len(rows),
            )

        try:
            file_type, mapped, results = map_and_validate(rows, expected_type)
        except Exception as exc:
            logger.error("%s: column mapping failed", file_name, exc_info=True)
            failed_type = structure.detected_format if expected_type == FileType.UNKNOWN else expected_type
            return FileUploadResult.rejected(
                file_name,
                [f"Column mapping failed: {exc}"],
                file_type=failed_type,
                row_count=len(rows),
            )

        return build_result(file_name, file_type, rows, mapped, results, structure)

    except Exception as exc:
        logger.error("%s: critical ingestion failure", file_name, exc_info=True)
        return FileUploadResult.rejected(
            file_name,
            [f"Critical parsing error: {str(exc) or type(exc).__name__}", *CRITICAL_GUIDANCE],
        )


async def parse_path(
    path: str | Path,
    expected_type: FileType | str = FileType.UNKNOWN,
    config: IngestionConfig | None = None,
) -> FileUploadResult:
    """Read a file from disk without blocking the loop, then ingest it."""
    path = Path(path)
    try:
        content = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        return FileUploadResult.rejected(path.name, [f"Failed to parse file: {exc}"])
    return await parse_file(path.name, content, expected_type, config)


def parse_file_sync(
    file_name: str,
    content: bytes,
    expected_type: FileType | str = FileType.UNKNOWN,
    config: IngestionConfig | None = None,
) -> FileUploadResult:
    return asyncio.run(parse_file(file_name, content, expected_type, config))
