import logging

import pandas as pd

from cohort_exposure_panel.utils import check_unique

logger = logging.getLogger(__name__)

# ICD-10 chapters A-R: deaths from non-external causes
NON_EXTERNAL_PREFIXES = list('ABCDEFGHIJKLMNOPQR')


def filter_outcome_causes(outcome: pd.DataFrame, prefixes: list) -> pd.DataFrame:
    """Keep death records whose ICD-10 code starts with an allowed letter.

    Args:
        outcome: Outcome table with an ``icd10`` column.
        prefixes: Allowed first characters of the ICD-10 code.

    Returns:
        Filtered outcome table.
    """
    keep = outcome['icd10'].astype('str').str[:1].isin(prefixes)
    logger.info(
        "Outcome filter: kept %d of %d death record(s)", keep.sum(), len(outcome)
    )
    return outcome.loc[keep].reset_index(drop=True)


def assemble_cohort(
    cohort: pd.DataFrame,
    outcome: pd.DataFrame,
    baseline: pd.DataFrame
) -> pd.DataFrame:
    """Merge cohort, outcome and baseline sex/centre into one row per subject.

    Derives ``birthyear``, ``event`` and ``dexit`` and drops subjects
    whose exit is not after the start of follow-up. Outcome records with
    no cohort row are dropped by the join.

    Args:
        cohort: Cohort table with ``eid, dob, asscentre, dstartfu, dendfu``.
        outcome: Outcome table with ``eid, devent, icd10``.
        baseline: Baseline table with at least ``eid, asscentre, sex``.

    Returns:
        Subject-level table with entry/exit window and event flag.

    Raises:
        SchemaViolationError: If ``eid`` is duplicated in any input.
    """
    check_unique(cohort, ['eid'], 'cohort')
    check_unique(outcome, ['eid'], 'outcome')
    check_unique(baseline, ['eid'], 'baseline')

    full = (
        cohort
        .merge(outcome, how='left', on='eid')
        .merge(baseline.filter(items=['eid', 'asscentre', 'sex']), on=['eid', 'asscentre'])
        .assign(
            birthyear=lambda x: x['dob'].dt.year,
            event=lambda x: (x['devent'].notna() & (x['devent'] <= x['dendfu'])).astype('int'),
            dexit=lambda x: x['devent'].where(x['event'] == 1, x['dendfu']),
        )
    )

    valid = full['dstartfu'] < full['dexit']
    logger.info(
        "Cohort: %d subject(s), %d excluded with exit on or before entry, %d event(s)",
        len(full), (~valid).sum(), full.loc[valid, 'event'].sum()
    )
    return full.loc[valid].reset_index(drop=True)
