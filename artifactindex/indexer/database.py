"""SQLite-backed artifact catalog."""

import sqlite3
import uuid
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from artifactindex.utils.logging import logger

from .exceptions import CatalogError
from .models import ArtifactCoordinates, ArtifactRef
from .schema import ARTIFACT_ENTRIES, COORDINATE_COLUMNS, ORDERABLE_COLUMNS, TABLES, validate_all_tables

_SELECT = f"SELECT {', '.join(ARTIFACT_ENTRIES.column_names())} FROM {ARTIFACT_ENTRIES.name}"


def _row_to_ref(row: sqlite3.Row) -> ArtifactRef:
    coordinates = None
    if row["group_id"] and row["artifact_id"] and row["version"]:
        coordinates = ArtifactCoordinates(
            group_id=row["group_id"],
            artifact_id=row["artifact_id"],
            version=row["version"],
            classifier=row["classifier"],
            extension=row["extension"] or "",
        )
    return ArtifactRef(
        uuid=row["uuid"],
        storage_id=row["storage_id"],
        repository_id=row["repository_id"],
        artifact_path=row["artifact_path"],
        coordinates=coordinates,
        size_in_bytes=row["size_in_bytes"],
        last_updated=datetime.fromtimestamp(row["last_updated"] / 1000, tz=timezone.utc),
    )


class SqliteArtifactCatalog:
    """Artifact catalog stored in a single SQLite table.

    Implements the ArtifactCatalog protocol. Usable as a context manager;
    the connection is closed on exit.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)
        self.conn = sqlite3.connect(self.db_path, timeout=60)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA synchronous=NORMAL")
        self.create_schema()

    def __enter__(self) -> "SqliteArtifactCatalog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        self.close()

    def create_schema(self) -> None:
        """Create all tables and indexes from schema.py definitions."""
        cursor = self.conn.cursor()
        for table_schema in TABLES.values():
            cursor.execute(table_schema.create_table_sql())
            for create_index_sql in table_schema.create_indexes_sql():
                cursor.execute(create_index_sql)
        self.conn.commit()

    def validate_schema(self) -> bool:
        mismatches = validate_all_tables(self.conn.cursor())
        for table_name, errors in mismatches.items():
            for error in errors:
                logger.warning("Schema mismatch in {}: {}", table_name, error)
        return not mismatches

    def commit(self) -> None:
        """Commit the current transaction."""
        try:
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise RuntimeError(f"Failed to commit catalog changes: {e}") from e

    def rollback(self) -> None:
        self.conn.rollback()

    def close(self) -> None:
        self.conn.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_artifact(
        self,
        storage_id: str,
        repository_id: str,
        artifact_path: str,
        coordinates: ArtifactCoordinates | None,
        size_in_bytes: int = 0,
        last_updated: datetime | None = None,
        entry_uuid: str | None = None,
    ) -> ArtifactRef:
        """Insert or replace the entry for storage/repository/path."""
        last_updated = last_updated or datetime.now(timezone.utc)
        ref = ArtifactRef(
            uuid=entry_uuid or str(uuid.uuid4()),
            storage_id=storage_id,
            repository_id=repository_id,
            artifact_path=artifact_path,
            coordinates=coordinates,
            size_in_bytes=size_in_bytes,
            last_updated=last_updated,
        )
        pattern = coordinates.as_pattern() if coordinates else dict.fromkeys(COORDINATE_COLUMNS)
        self.conn.execute(
            f"""
            INSERT INTO {ARTIFACT_ENTRIES.name} ({', '.join(ARTIFACT_ENTRIES.column_names())})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(storage_id, repository_id, artifact_path) DO UPDATE SET
                group_id = excluded.group_id,
                artifact_id = excluded.artifact_id,
                version = excluded.version,
                classifier = excluded.classifier,
                extension = excluded.extension,
                size_in_bytes = excluded.size_in_bytes,
                last_updated = excluded.last_updated
            """,
            (
                ref.uuid,
                storage_id,
                repository_id,
                artifact_path,
                *(pattern[column] for column in COORDINATE_COLUMNS),
                size_in_bytes,
                ref.last_modified_millis,
            ),
        )
        stored_uuid = self.conn.execute(
            f"SELECT uuid FROM {ARTIFACT_ENTRIES.name} "
            "WHERE storage_id = ? AND repository_id = ? AND artifact_path = ?",
            (storage_id, repository_id, artifact_path),
        ).fetchone()[0]
        return replace(ref, uuid=stored_uuid)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _where(
        self,
        storage_id: str,
        repository_id: str,
        coordinates: Mapping[str, str | None],
        strict: bool,
    ) -> tuple[str, list]:
        clauses = ["storage_id = ?", "repository_id = ?"]
        params: list = [storage_id, repository_id]
        for column, value in coordinates.items():
            if column not in COORDINATE_COLUMNS:
                raise CatalogError(f"Unknown coordinate: {column}")
            if value is None:
                if strict:
                    clauses.append(f"{column} IS NULL")
            elif strict:
                clauses.append(f"{column} = ?")
                params.append(value)
            else:
                clauses.append(f"{column} LIKE ?")
                params.append(f"{value}%")
        return " AND ".join(clauses), params

    def find_matching(
        self,
        storage_id: str,
        repository_id: str,
        coordinates: Mapping[str, str | None],
        strict: bool = True,
    ) -> list[ArtifactRef]:
        """Entries matching a coordinate pattern, in catalog (uuid) order."""
        where, params = self._where(storage_id, repository_id, coordinates, strict)
        rows = self.conn.execute(f"{_SELECT} WHERE {where} ORDER BY uuid", params).fetchall()
        return [_row_to_ref(row) for row in rows]

    def count_matching(
        self,
        storage_id: str,
        repository_id: str,
        coordinates: Mapping[str, str | None],
        strict: bool = True,
    ) -> int:
        where, params = self._where(storage_id, repository_id, coordinates, strict)
        row = self.conn.execute(
            f"SELECT COUNT(*) FROM {ARTIFACT_ENTRIES.name} WHERE {where}", params
        ).fetchone()
        return row[0]

    def find_page(
        self,
        storage_id: str,
        repository_id: str,
        skip: int,
        limit: int,
        order_by: str = "uuid",
    ) -> list[ArtifactRef]:
        """One page of a repository's entries ordered by a whitelisted column."""
        if order_by not in ORDERABLE_COLUMNS:
            raise CatalogError(f"Cannot order catalog pages by {order_by}")
        rows = self.conn.execute(
            f"{_SELECT} WHERE storage_id = ? AND repository_id = ? "
            f"ORDER BY {order_by}, uuid LIMIT ? OFFSET ?",
            (storage_id, repository_id, limit, skip),
        ).fetchall()
        return [_row_to_ref(row) for row in rows]

    def find_by_path(self, storage_id: str, repository_id: str, artifact_path: str) -> ArtifactRef | None:
        row = self.conn.execute(
            f"{_SELECT} WHERE storage_id = ? AND repository_id = ? AND artifact_path = ?",
            (storage_id, repository_id, artifact_path.lstrip("/")),
        ).fetchone()
        return _row_to_ref(row) if row else None
