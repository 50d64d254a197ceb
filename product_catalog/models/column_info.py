"""Table column description used for schema diagnostics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnInfo:
    """One column of a table as reported by information_schema."""

    column_name: str
    data_type: str
    is_nullable: bool
