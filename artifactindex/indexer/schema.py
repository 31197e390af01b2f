"""Catalog database schema - single source of truth for the artifact_entries table."""

import sqlite3
from dataclasses import dataclass, field


@dataclass
class Column:
    """Represents a database column with type and constraints."""

    name: str
    type: str
    nullable: bool = True
    default: str | None = None
    primary_key: bool = False

    def to_sql(self) -> str:
        """Generate SQL column definition."""
        parts = [self.name, self.type]
        if not self.nullable:
            parts.append("NOT NULL")
        if self.default is not None:
            parts.append(f"DEFAULT {self.default}")
        if self.primary_key:
            parts.append("PRIMARY KEY")
        return " ".join(parts)


@dataclass
class TableSchema:
    """Represents a complete table schema."""

    name: str
    columns: list[Column]
    indexes: list[tuple[str, list[str]]] = field(default_factory=list)
    unique_constraints: list[list[str]] = field(default_factory=list)

    def column_names(self) -> list[str]:
        """Get list of column names in definition order."""
        return [col.name for col in self.columns]

    def create_table_sql(self) -> str:
        """Generate CREATE TABLE statement."""
        col_defs = [col.to_sql() for col in self.columns]
        for unique_cols in self.unique_constraints:
            col_defs.append(f"UNIQUE({', '.join(unique_cols)})")
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n    " + ",\n    ".join(col_defs) + "\n)"

    def create_indexes_sql(self) -> list[str]:
        """Generate CREATE INDEX statements."""
        return [
            f"CREATE INDEX IF NOT EXISTS {idx_name} ON {self.name} ({', '.join(idx_cols)})"
            for idx_name, idx_cols in self.indexes
        ]

    def validate_against_db(self, cursor: sqlite3.Cursor) -> tuple[bool, list[str]]:
        """Validate that the actual database table matches this schema."""
        errors = []

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name=?", (self.name,))
        if not cursor.fetchone():
            return False, [f"Table {self.name} does not exist"]

        cursor.execute(f"PRAGMA table_info({self.name})")
        actual_cols = {row[1]: row[2] for row in cursor.fetchall()}

        for col in self.columns:
            if col.name not in actual_cols:
                errors.append(f"Column {self.name}.{col.name} missing in database")
            elif actual_cols[col.name].upper() != col.type.upper():
                errors.append(
                    f"Column {self.name}.{col.name} type mismatch: "
                    f"expected {col.type}, got {actual_cols[col.name]}"
                )

        return len(errors) == 0, errors


ARTIFACT_ENTRIES = TableSchema(
    name="artifact_entries",
    columns=[
        Column("uuid", "TEXT", nullable=False, primary_key=True),
        Column("storage_id", "TEXT", nullable=False),
        Column("repository_id", "TEXT", nullable=False),
        Column("artifact_path", "TEXT", nullable=False),
        Column("group_id", "TEXT"),
        Column("artifact_id", "TEXT"),
        Column("version", "TEXT"),
        Column("classifier", "TEXT"),
        Column("extension", "TEXT"),
        Column("size_in_bytes", "INTEGER", nullable=False, default="0"),
        Column("last_updated", "INTEGER", nullable=False, default="0"),
    ],
    indexes=[
        ("idx_artifact_entries_repo", ["storage_id", "repository_id"]),
        ("idx_artifact_entries_gav", ["group_id", "artifact_id", "version"]),
    ],
    unique_constraints=[["storage_id", "repository_id", "artifact_path"]],
)

# Columns a coordinate pattern may constrain
COORDINATE_COLUMNS: tuple[str, ...] = (
    "group_id",
    "artifact_id",
    "version",
    "classifier",
    "extension",
)

# Columns a page may be ordered by
ORDERABLE_COLUMNS: frozenset[str] = frozenset({"uuid", "artifact_path", "last_updated"})

TABLES: dict[str, TableSchema] = {
    ARTIFACT_ENTRIES.name: ARTIFACT_ENTRIES,
}


def validate_all_tables(cursor: sqlite3.Cursor) -> dict[str, list[str]]:
    """Validate all table schemas, returning {table: errors} for mismatches."""
    mismatches = {}
    for table_name, schema in TABLES.items():
        is_valid, errors = schema.validate_against_db(cursor)
        if not is_valid:
            mismatches[table_name] = errors
    return mismatches
