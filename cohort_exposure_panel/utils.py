import pathlib

import pandas as pd
import yaml

from cohort_exposure_panel.errors import SchemaViolationError


def load_yaml(fpath: str) -> dict:
    """Load YAML configuration file.

    Args:
        fpath: Path to the YAML file.

    Returns:
        Dictionary containing the parsed YAML content.
    """
    fpath = pathlib.PurePath(fpath)
    with open(fpath, 'r') as file:
        conf = yaml.safe_load(file)

        for key, value in conf.items():
            if isinstance(value, str):
                conf[key] = value.encode().decode('unicode_escape')

    return conf


def check_unique(df: pd.DataFrame, keys: list, table: str) -> pd.DataFrame:
    """Fail if rows of `df` are not unique on `keys`.

    Args:
        df: Table to check.
        keys: Columns that must jointly identify a row.
        table: Table name used in the error message.

    Returns:
        The input DataFrame, unchanged, so the check can sit in a pipe chain.

    Raises:
        SchemaViolationError: If any key combination occurs more than once.
    """
    dupes = df.duplicated(subset=keys, keep=False)
    if dupes.any():
        offending = (
            df
            .loc[dupes, keys]
            .drop_duplicates()
            .reset_index(drop=True)
        )
        raise SchemaViolationError(table, keys, offending)
    return df
