import pandas as pd


def add_follow_up_ages(
    panel: pd.DataFrame,
    start_col: str = 'dstartfu',
    stop_col: str = 'dexit',
    days_in_year: float = 365.25
) -> pd.DataFrame:
    """Add fractional age at interval start and exit.

    Args:
        panel: Table with ``dob`` and interval bounds.
        start_col: Interval start column.
        stop_col: Interval stop column.
        days_in_year: Days in a year for age calculation.

    Returns:
        Table with ``agestartfu`` and ``ageexit``.
    """
    return panel.assign(
        agestartfu=lambda x: (x[start_col] - x['dob']).dt.days / days_in_year,
        ageexit=lambda x: (x[stop_col] - x['dob']).dt.days / days_in_year,
    )


def add_age_groups(
    df: pd.DataFrame,
    breaks: list,
    labels: list,
    year_col: str = 'year'
) -> pd.DataFrame:
    """Add the approximate age band ``agegr`` from whole calendar years.

    Age is ``year - year(dob)``, deliberately coarser than the fractional
    follow-up ages. Bins are right-closed.

    Args:
        df: Table with ``dob`` and a calendar year column.
        breaks: Age band edges.
        labels: One label per band.
        year_col: Calendar year column.

    Returns:
        Table with ``agegr``.
    """
    return df.assign(
        agegr=lambda x: pd.cut(
            x[year_col] - x['dob'].dt.year,
            bins=breaks,
            labels=labels
        )
    )


def add_exposure_age_groups(
    exposure: pd.DataFrame,
    cohort: pd.DataFrame,
    breaks: list,
    labels: list
) -> pd.DataFrame:
    """Attach age bands to the exposure table for stratified summaries."""
    return (
        exposure
        .merge(cohort.filter(items=['eid', 'dob']), on='eid')
        .pipe(add_age_groups, breaks, labels)
        .drop(columns='dob')
    )
