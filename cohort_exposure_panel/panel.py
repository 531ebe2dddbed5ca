import logging

import pandas as pd

from cohort_exposure_panel.ages import (
    add_age_groups,
    add_exposure_age_groups,
    add_follow_up_ages,
)
from cohort_exposure_panel.cohort import assemble_cohort, filter_outcome_causes
from cohort_exposure_panel.covariates import (
    categorize_baseline,
    relabel_levels,
    unorder_categoricals,
)
from cohort_exposure_panel.exposure import EXPOSURE_KEY, add_moving_average, lag_column_name
from cohort_exposure_panel.splitting import (
    add_calendar_years,
    calendar_cut_points,
    split_follow_up,
)
from cohort_exposure_panel.utils import check_unique

logger = logging.getLogger(__name__)

PANEL_KEY = ['eid', 'year']
TRANSIENT_COLS = ['sex', 'asscentre']


def attach_baseline(panel: pd.DataFrame, baseline: pd.DataFrame) -> pd.DataFrame:
    """Replace the transient sex/centre fields with the full baseline record.

    Args:
        panel: Split intervals carrying ``sex`` and ``asscentre`` from assembly.
        baseline: One row per subject.

    Returns:
        Intervals of subjects present in `baseline`, with all covariates.

    Raises:
        SchemaViolationError: If ``eid`` is duplicated in `baseline`.
    """
    check_unique(baseline, ['eid'], 'baseline')

    result = (
        panel
        .drop(columns=TRANSIENT_COLS, errors='ignore')
        .merge(baseline, on='eid', validate='many_to_one')
    )

    dropped = len(panel) - len(result)
    if dropped:
        logger.info("Baseline join: dropped %d interval(s) without a baseline record", dropped)
    return result


def attach_exposure(
    panel: pd.DataFrame,
    exposure: pd.DataFrame,
    lag: int,
    column: str = 'pm25'
) -> pd.DataFrame:
    """Join the previous year's exposure onto each interval.

    Matches panel ``(eid, yearexp)`` to exposure ``(eid, year)``. Exposure
    rows whose lagged average is missing (an incomplete window) are
    removed first, so intervals without a complete exposure are dropped.
    Missing values in other exposure columns do not drop rows.

    Args:
        panel: Intervals with ``eid`` and ``yearexp``.
        exposure: Exposure table with its moving average already computed.
        lag: Lag window the moving average was computed with.
        column: Concentration column the average was computed from.

    Returns:
        Intervals with complete exposure, sorted by (eid, year).

    Raises:
        SchemaViolationError: If (eid, year) is duplicated in `exposure` or
            in the resulting panel.
    """
    check_unique(exposure, EXPOSURE_KEY, 'exposure')

    result = (
        panel
        .merge(
            exposure
            .dropna(subset=[lag_column_name(column, lag)])
            .rename(columns={'year': 'yearexp'}),
            on=['eid', 'yearexp']
        )
        .sort_values(PANEL_KEY)
        .reset_index(drop=True)
        .pipe(check_unique, PANEL_KEY, 'panel')
    )

    logger.info(
        "Exposure join: kept %d of %d interval(s) with complete exposure",
        len(result), len(panel)
    )
    return result


def make_panel_dataset(
    cohort: pd.DataFrame,
    outcome: pd.DataFrame,
    baseline: pd.DataFrame,
    exposure: pd.DataFrame,
    config: dict
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Build the subject-year panel from the four source tables.

    Args:
        cohort: Cohort table (``eid, dob, asscentre, dstartfu, dendfu``).
        outcome: Death records (``eid, devent, icd10``).
        baseline: Baseline covariates (``eid, sex, asscentre, ...``).
        exposure: Yearly exposure (``eid, year, <exposure_column>``).
        config: Pipeline configuration with ``lag``, ``age_breaks`` and
            ``age_labels``; optionally ``exposure_column``, ``icd_prefixes``,
            ``categories`` and ``level_maps``.

    Returns:
        Tuple of (panel, exposure with moving average and age bands).
    """
    lag = config['lag']
    column = config.get('exposure_column', 'pm25')

    if config.get('icd_prefixes') is not None:
        outcome = filter_outcome_causes(outcome, config['icd_prefixes'])

    exposure_ma = add_moving_average(exposure, lag, column)

    baseline_cat = (
        baseline
        .pipe(categorize_baseline, config.get('categories'))
        .pipe(relabel_levels, config.get('level_maps', {}))
        .pipe(unorder_categoricals)
    )

    full = assemble_cohort(cohort, outcome, baseline_cat)
    cut_points = calendar_cut_points(full)

    panel = (
        full
        .pipe(split_follow_up, cut_points)
        .pipe(add_calendar_years)
        .pipe(add_follow_up_ages)
        .pipe(attach_baseline, baseline_cat)
        .pipe(attach_exposure, exposure_ma, lag, column)
        .pipe(add_age_groups, config['age_breaks'], config['age_labels'])
    )

    exposure_out = add_exposure_age_groups(
        exposure_ma, cohort, config['age_breaks'], config['age_labels']
    )

    logger.info(
        "Panel: %d row(s) for %d subject(s), %d event(s)",
        len(panel), panel['eid'].nunique(), panel['event'].sum()
    )
    return panel, exposure_out
