import bisect
from datetime import datetime
import logging

from dateutil.rrule import YEARLY, rrule
import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def calendar_cut_points(
    cohort: pd.DataFrame,
    start_col: str = 'dstartfu',
    end_col: str = 'dendfu'
) -> list:
    """First day of every calendar year spanned by the whole cohort.

    Runs from Jan 1 of the earliest entry year to Jan 1 of the latest
    administrative end year, both included.

    Args:
        cohort: Cohort table; must cover every subject that will be split.
        start_col: Entry date column.
        end_col: End-of-follow-up date column.

    Returns:
        Sorted list of Timestamps, empty for an empty cohort.
    """
    if cohort.empty:
        return []

    first = datetime(cohort[start_col].min().year, 1, 1)
    last = datetime(cohort[end_col].max().year, 1, 1)
    return [pd.Timestamp(d) for d in rrule(YEARLY, dtstart=first, until=last)]


def split_subject(start, stop, event: int, cut_points: list) -> list:
    """Split one follow-up period [start, stop) at the given cut points.

    Walks the cut points with state (current start, next cut index): each
    cut strictly inside the period closes a segment with event 0, and the
    final segment ending at `stop` carries `event`.

    Args:
        start: Entry date.
        stop: Exit date, after `start`.
        event: Subject-level event flag.
        cut_points: Sorted cut dates.

    Returns:
        List of (segment start, segment stop, event) tuples.
    """
    segments = []
    current = start
    i = bisect.bisect_right(cut_points, start)

    while i < len(cut_points) and cut_points[i] < stop:
        segments.append((current, cut_points[i], 0))
        current = cut_points[i]
        i += 1

    segments.append((current, stop, event))
    return segments


def split_follow_up(
    cohort: pd.DataFrame,
    cut_points: list,
    start_col: str = 'dstartfu',
    stop_col: str = 'dexit',
    event_col: str = 'event'
) -> pd.DataFrame:
    """Split each subject's follow-up into calendar-year intervals.

    Every other column is copied onto each interval of its subject. The
    start and stop columns keep their names and hold the interval bounds.

    Args:
        cohort: One row per subject with start, stop and event columns.
        cut_points: Sorted cut dates shared by all subjects.
        start_col: Interval start column.
        stop_col: Interval stop column.
        event_col: Event flag column.

    Returns:
        One row per subject-interval, in subject then time order.
    """
    cut_points = sorted(pd.Timestamp(c) for c in cut_points)

    starts, stops, events, counts = [], [], [], []
    for start, stop, event in zip(cohort[start_col], cohort[stop_col], cohort[event_col]):
        segments = split_subject(pd.Timestamp(start), pd.Timestamp(stop), event, cut_points)
        counts.append(len(segments))
        for seg_start, seg_stop, seg_event in segments:
            starts.append(seg_start)
            stops.append(seg_stop)
            events.append(seg_event)

    split = (
        cohort
        .iloc[np.repeat(np.arange(len(cohort)), np.array(counts, dtype=int))]
        .reset_index(drop=True)
        .assign(**{
            start_col: pd.to_datetime(pd.Series(starts, dtype='object')),
            stop_col: pd.to_datetime(pd.Series(stops, dtype='object')),
            event_col: pd.Series(events, dtype='int'),
        })
    )

    logger.info(
        "Split %d subject(s) into %d interval(s) at %d cut point(s)",
        len(cohort), len(split), len(cut_points)
    )
    return split


def add_calendar_years(panel: pd.DataFrame, start_col: str = 'dstartfu') -> pd.DataFrame:
    """Add the calendar year of each interval and its exposure year (year - 1)."""
    return panel.assign(
        year=lambda x: x[start_col].dt.year,
        yearexp=lambda x: x['year'] - 1,
    )
