from prod2testing.anonymization.models import ColumnSpec, Strategy, Templated


def decide_strategy(column_spec: ColumnSpec) -> Strategy:
    """Pick PER_ROW when any replacement needs a per-row counter."""
    if any(isinstance(value, Templated) for value in column_spec.values()):
        return Strategy.PER_ROW
    return Strategy.TABLE_WIDE
