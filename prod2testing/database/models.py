from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class ColumnMetadata:
    """Represents a row from information_schema.columns."""

    data_type: str
    nullable: bool
    default_value: str | None = None


@dataclass(frozen=True)
class SchemaInfo:
    """Read-only snapshot of the live columns of the configured tables.

    Absence of a table or column means it does not exist in the database.
    """

    tables: Mapping[str, Mapping[str, ColumnMetadata]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_dict(cls, tables: dict[str, dict[str, ColumnMetadata]]) -> "SchemaInfo":
        return cls(
            MappingProxyType(
                {name: MappingProxyType(dict(columns)) for name, columns in tables.items()}
            )
        )

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def has_column(self, table: str, column: str) -> bool:
        return column in self.tables.get(table, {})

    def columns(self, table: str) -> Mapping[str, ColumnMetadata]:
        return self.tables.get(table, MappingProxyType({}))
