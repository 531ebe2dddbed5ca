import logging

import pandas as pd

from cohort_exposure_panel.utils import check_unique

logger = logging.getLogger(__name__)

EXPOSURE_KEY = ['eid', 'year']


def lag_column_name(column: str, lag: int) -> str:
    """Name of the moving-average column, e.g. ``pm25_01`` for lag 1."""
    return f"{column}_0{lag}"


def add_moving_average(
    exposure: pd.DataFrame,
    lag: int,
    column: str = 'pm25'
) -> pd.DataFrame:
    """Add the moving average of `column` over years [year - lag, year].

    Years are matched by value, not by row position, so a gap in a
    subject's series leaves the average missing for every year whose
    window covers the gap. A missing concentration does the same.

    Args:
        exposure: Table with one row per (eid, year).
        lag: Number of preceding years in the window; 0 keeps the same year.
        column: Concentration column to average.

    Returns:
        New table sorted by (eid, year) with the lagged average added.

    Raises:
        ValueError: If `lag` is negative.
        SchemaViolationError: If (eid, year) is not unique.
    """
    if lag < 0:
        raise ValueError(f"lag must be >= 0, got {lag}")

    check_unique(exposure, EXPOSURE_KEY, 'exposure')

    values = exposure.filter(items=EXPOSURE_KEY + [column])
    window_cols = [f'_{column}_lag{k}' for k in range(lag + 1)]

    result = exposure.sort_values(EXPOSURE_KEY).reset_index(drop=True)
    for k, name in enumerate(window_cols):
        # value observed in year y becomes the lag-k value of year y + k
        result = result.merge(
            values
            .assign(year=lambda x: x['year'] + k)
            .rename(columns={column: name}),
            how='left',
            on=EXPOSURE_KEY
        )

    ma_col = lag_column_name(column, lag)
    result = (
        result
        .assign(**{ma_col: lambda x: x[window_cols].mean(axis=1, skipna=False)})
        .drop(columns=window_cols)
    )

    logger.info(
        "Exposure lag %d: %d of %d subject-years with a complete window",
        lag, result[ma_col].notna().sum(), len(result)
    )
    return result
