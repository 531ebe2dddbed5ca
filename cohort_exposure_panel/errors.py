class SchemaViolationError(ValueError):
    """Raised when a table breaks a key or uniqueness assumption of the joins.

    Args:
        table: Name of the offending table.
        keys: Key columns that were expected to be unique.
        offending: DataFrame of the offending key combinations.
    """

    def __init__(self, table: str, keys: list, offending=None):
        self.table = table
        self.keys = keys
        self.offending = offending

        message = f"{table}: duplicated key(s) on {keys}"
        if offending is not None and len(offending) > 0:
            preview = offending.head(10).to_dict(orient='records')
            message += f" ({len(offending)} row(s), e.g. {preview})"
        super().__init__(message)


class CategorizationError(ValueError):
    """Raised when a non-missing value falls outside every bin of a rule."""
