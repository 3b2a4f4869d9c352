"""Frame-level data quality checks using pandera."""

import pandera as pa
import pandas as pd
from pandera import DataFrameSchema

type ValidationOutcome = dict[str, str | bool | list[str]]


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema) -> ValidationOutcome:
    """Validate a DataFrame against a pandera schema, collecting every failure."""
    try:
        schema.validate(df, lazy=True)
        return {"valid": True, "status": "ok", "errors": []}
    except pa.errors.SchemaErrors as e:
        errors = []
        for _, row in e.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val} if col is not None and not pd.isna(col):
                    errors.append(f"Column '{col}' failed check '{check}': {val}")
                case {"check": check, "index": idx}:
                    errors.append(f"Row {idx} failed check '{check}'")
                case failure:
                    errors.append(f"Validation failure: {failure}")
        return {"valid": False, "status": "error", "errors": errors}


def validate_unique(df: pd.DataFrame, columns: list[str]) -> ValidationOutcome:
    """Check that specified columns form a unique key."""
    duplicates = df.duplicated(subset=columns, keep=False)
    dup_count = int(duplicates.sum())

    match dup_count:
        case 0:
            return {"valid": True, "status": "ok", "errors": []}
        case n:
            sample = df.loc[duplicates, columns[0]].astype(str).unique().tolist()[:5]
            return {
                "valid": False,
                "status": "error",
                "errors": [f"Found {n} duplicate rows on columns {columns}. Sample: {sample}"],
            }
