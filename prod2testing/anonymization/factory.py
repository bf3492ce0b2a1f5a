from prod2testing.anonymization.base import BaseTableAnonymizer
from prod2testing.anonymization.models import Strategy
from prod2testing.anonymization.row_anonymizer import RowAnonymizer
from prod2testing.anonymization.table_anonymizer import TableAnonymizer
from prod2testing.database.repositories.table_repository import TableRepository


class AnonymizerFactory:
    """Creates the anonymizer for each strategy."""

    @classmethod
    def create(cls, strategy: Strategy, table_repo: TableRepository) -> BaseTableAnonymizer:
        """Create the anonymizer implementing *strategy*."""
        if strategy is Strategy.PER_ROW:
            return RowAnonymizer(table_repo)
        if strategy is Strategy.TABLE_WIDE:
            return TableAnonymizer(table_repo)
        raise ValueError(f"Unknown anonymization strategy '{strategy}'")
