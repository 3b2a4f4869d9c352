"""Result types and exceptions for file ingestion."""

from dataclasses import dataclass, field

from raiseplanner.utils.types import FileType, MappedRow


class IngestionError(Exception):
    """Base exception for ingestion failures; never escapes ``parse_file``."""


class FileRejected(IngestionError):
    """The file itself is unacceptable (extension, size, empty bytes)."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__("; ".join(messages))


class DecodeError(IngestionError):
    """Bytes could not be decoded into rows."""


class MappingFailure(IngestionError):
    """Unexpected failure while mapping columns onto canonical fields."""


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    employee_id: str


@dataclass(frozen=True)
class StructureValidation:
    """Outcome of the structural pass that gates column mapping."""

    is_valid: bool
    detected_format: FileType
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileUploadResult:
    file_name: str
    file_type: FileType
    row_count: int
    valid_rows: int
    errors: list[str] = field(default_factory=list)
    data: list[MappedRow] = field(default_factory=list)

    @classmethod
    def rejected(
        cls,
        file_name: str,
        errors: list[str],
        file_type: FileType = FileType.UNKNOWN,
        row_count: int = 0,
    ) -> "FileUploadResult":
        return cls(
            file_name=file_name,
            file_type=file_type,
            row_count=row_count,
            valid_rows=0,
            errors=list(errors),
            data=[],
        )

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "fileType": str(self.file_type),
            "rowCount": self.row_count,
            "validRows": self.valid_rows,
            "errors": list(self.errors),
            "data": [dict(row) for row in self.data],
        }
