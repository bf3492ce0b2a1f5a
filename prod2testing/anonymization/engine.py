from typing import Any

import psycopg

from prod2testing.anonymization.exceptions import (
    AnonymizationWarning,
    MissingColumnWarning,
    MissingTableWarning,
    SchemaError,
)
from prod2testing.anonymization.factory import AnonymizerFactory
from prod2testing.anonymization.models import (
    AnonymizationConfig,
    AnonymizationReport,
    ColumnSpec,
    Strategy,
    TablePlan,
)
from prod2testing.anonymization.planner import decide_strategy
from prod2testing.database.models import SchemaInfo
from prod2testing.database.repositories.schema_repository import SchemaRepository
from prod2testing.database.repositories.table_repository import TableRepository
from prod2testing.logging.logger import Log


class AnonymizationEngine:
    """Plans every configured table against the schema snapshot, then rewrites them.

    Planning issues read-only queries only, so a table without a primary key
    aborts the run before any row has been modified.
    """

    def __init__(
        self,
        schema_repo: SchemaRepository,
        table_repo: TableRepository,
        schema: str,
    ) -> None:
        self._schema_repo = schema_repo
        self._table_repo = table_repo
        self._schema = schema

    def plan(
        self,
        conn: psycopg.Connection[Any],
        config: AnonymizationConfig,
        schema_info: SchemaInfo,
    ) -> tuple[list[TablePlan], list[AnonymizationWarning]]:
        """Validate *config* against *schema_info* and build one plan per table.

        Missing tables and columns are dropped from the plans with a warning.

        Raises:
            SchemaError: if a table needing per-row updates has no primary key.
        """
        plans: list[TablePlan] = []
        warnings: list[AnonymizationWarning] = []
        for table, column_spec in config.items():
            if not schema_info.has_table(table):
                warning = MissingTableWarning(table)
                Log.warning(str(warning), table=table)
                warnings.append(warning)
                continue

            known: ColumnSpec = {}
            for column, value in column_spec.items():
                if not schema_info.has_column(table, column):
                    column_warning = MissingColumnWarning(table, column)
                    Log.warning(str(column_warning), table=table, column=column)
                    warnings.append(column_warning)
                    continue
                known[column] = value

            # Only columns that will actually be written decide the strategy
            strategy = decide_strategy(known)
            primary_key: tuple[str, ...] = ()
            if strategy is Strategy.PER_ROW:
                primary_key = self._schema_repo.fetch_primary_key(conn, self._schema, table)
                if not primary_key:
                    raise SchemaError(
                        f"The table '{table}' has no primary key, "
                        "rows cannot be anonymized individually"
                    )
            plans.append(TablePlan(table, strategy, known, primary_key))
        return plans, warnings

    def run(
        self,
        conn: psycopg.Connection[Any],
        config: AnonymizationConfig,
        schema_info: SchemaInfo,
    ) -> AnonymizationReport:
        """Anonymize every configured table inside the caller's transaction."""
        plans, warnings = self.plan(conn, config, schema_info)
        report = AnonymizationReport(warnings=warnings)

        for plan in plans:
            label = "by rows" if plan.strategy is Strategy.PER_ROW else "by table"
            Log.info(f"- {plan.table} ({label})", table=plan.table, strategy=plan.strategy.value)
            anonymizer = AnonymizerFactory.create(plan.strategy, self._table_repo)
            result = anonymizer.apply(
                conn,
                plan.table,
                plan.column_spec,
                schema_info,
                primary_key=plan.primary_key,
            )
            report.tables.append(result)
            report.warnings.extend(result.warnings)

        Log.info(
            f"Anonymized {len(report.tables)} tables, {report.rows_updated} rows updated, "
            f"{len(report.warnings)} warnings"
        )
        return report


def build_engine(schema: str) -> AnonymizationEngine:
    """Build an AnonymizationEngine with the default repositories."""
    return AnonymizationEngine(
        schema_repo=SchemaRepository(),
        table_repo=TableRepository(schema),
        schema=schema,
    )


def run_anonymization(
    conn: psycopg.Connection[Any],
    config: AnonymizationConfig,
    schema_info: SchemaInfo,
    schema: str = "public",
) -> AnonymizationReport:
    """Anonymize all tables of *config* on *conn*; the caller owns the transaction."""
    return build_engine(schema).run(conn, config, schema_info)
