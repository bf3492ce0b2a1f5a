from dataclasses import dataclass, field
from enum import Enum

from prod2testing.anonymization.exceptions import AnonymizationWarning

PLACEHOLDER_TOKEN = "{{x}}"

Scalar = str | int | float | bool | None


@dataclass(frozen=True)
class LiteralValue:
    """Replacement written identically to every row."""

    value: Scalar

    def render(self, counter: int) -> Scalar:
        _ = counter  # literals do not vary per row
        return self.value


@dataclass(frozen=True)
class Templated:
    """Replacement string carrying a per-row sequence placeholder."""

    template: str
    token: str = PLACEHOLDER_TOKEN

    def render(self, counter: int) -> str:
        return self.template.replace(self.token, str(counter))


ReplacementValue = LiteralValue | Templated

# column name -> replacement
ColumnSpec = dict[str, ReplacementValue]

# table name -> column spec, in document order
AnonymizationConfig = dict[str, ColumnSpec]


def parse_replacement(raw: Scalar) -> ReplacementValue:
    """Tag a raw configured value as a Templated or a LiteralValue."""
    if isinstance(raw, str) and PLACEHOLDER_TOKEN in raw:
        return Templated(raw)
    return LiteralValue(raw)


class Strategy(str, Enum):
    TABLE_WIDE = "table"
    PER_ROW = "rows"


@dataclass(frozen=True)
class TablePlan:
    """Validated work item for one table, built before any row is touched."""

    table: str
    strategy: Strategy
    column_spec: ColumnSpec
    primary_key: tuple[str, ...] = ()


@dataclass
class TableResult:
    """Outcome of anonymizing a single table."""

    table: str
    strategy: Strategy
    rows_updated: int = 0
    warnings: list[AnonymizationWarning] = field(default_factory=list)


@dataclass
class AnonymizationReport:
    """Outcome of a full anonymization run."""

    tables: list[TableResult] = field(default_factory=list)
    warnings: list[AnonymizationWarning] = field(default_factory=list)

    @property
    def rows_updated(self) -> int:
        return sum(t.rows_updated for t in self.tables)
