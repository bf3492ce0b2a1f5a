from collections.abc import Iterable
from pathlib import Path

from prod2testing.anonymization.engine import AnonymizationEngine
from prod2testing.anonymization.models import AnonymizationReport
from prod2testing.config.loader import ConfigLoader
from prod2testing.config.settings import Settings
from prod2testing.database.connection import get_connection
from prod2testing.database.repositories.schema_repository import SchemaRepository
from prod2testing.database.repositories.table_repository import TableRepository
from prod2testing.logging.logger import Log


class AnonymizationRunner:
    """Run one anonymization as a single transaction: commit all or nothing."""

    def __init__(
        self,
        loader: ConfigLoader,
        schema_repo: SchemaRepository,
        table_repo: TableRepository,
        engine: AnonymizationEngine,
        settings: Settings,
    ) -> None:
        self._loader = loader
        self._schema_repo = schema_repo
        self._table_repo = table_repo
        self._engine = engine
        self._settings = settings

    def run(
        self,
        base_path: Path | None = None,
        overlay_paths: Iterable[Path] = (),
    ) -> AnonymizationReport:
        """Load configuration, then anonymize and purge inside one transaction.

        Configuration errors surface before a connection is taken. Any error
        after that rolls the whole transaction back and is re-raised.
        """
        config = self._loader.load(
            base_path or self._settings.anonymization_config_path,
            overlay_paths,
        )
        Log.info(f"Loaded anonymization config for {len(config)} tables")

        with get_connection() as conn:
            Log.info("- start transaction")
            try:
                schema_info = self._schema_repo.fetch_schema(
                    conn, self._settings.db_schema, config.keys()
                )
                Log.info("- anonymize:")
                report = self._engine.run(conn, config, schema_info)
                for table in self._settings.purge_tables:
                    deleted = self._table_repo.purge(conn, table)
                    Log.info(f"- purge {table} ({deleted} rows)", table=table, rows=deleted)
                conn.commit()
            except Exception as exc:
                conn.rollback()
                Log.error(f"Anonymization failed, transaction rolled back: {exc}")
                raise
            Log.info("- commit changes")

        return report


def build_runner(settings: Settings) -> AnonymizationRunner:
    """Build an AnonymizationRunner with all required collaborators."""
    schema_repo = SchemaRepository()
    table_repo = TableRepository(settings.db_schema)
    return AnonymizationRunner(
        loader=ConfigLoader(),
        schema_repo=schema_repo,
        table_repo=table_repo,
        engine=AnonymizationEngine(schema_repo, table_repo, settings.db_schema),
        settings=settings,
    )
