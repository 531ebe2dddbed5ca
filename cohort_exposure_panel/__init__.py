"""Cohort-exposure linkage and calendar-year splitting for survival panels."""

__version__ = "0.1.0"

from cohort_exposure_panel.ages import (
    add_age_groups,
    add_exposure_age_groups,
    add_follow_up_ages,
)
from cohort_exposure_panel.cohort import assemble_cohort, filter_outcome_causes
from cohort_exposure_panel.covariates import (
    categorize_baseline,
    cut_packyears,
    cut_quintiles,
    cut_waist_height,
    quintile_edges,
    relabel_levels,
    unorder_categoricals,
)
from cohort_exposure_panel.errors import CategorizationError, SchemaViolationError
from cohort_exposure_panel.exposure import add_moving_average, lag_column_name
from cohort_exposure_panel.panel import (
    attach_baseline,
    attach_exposure,
    make_panel_dataset,
)
from cohort_exposure_panel.splitting import (
    add_calendar_years,
    calendar_cut_points,
    split_follow_up,
    split_subject,
)
from cohort_exposure_panel.utils import check_unique, load_yaml

__all__ = [
    "load_yaml",
    "check_unique",
    "SchemaViolationError",
    "CategorizationError",
    "add_moving_average",
    "lag_column_name",
    "cut_packyears",
    "cut_waist_height",
    "quintile_edges",
    "cut_quintiles",
    "categorize_baseline",
    "relabel_levels",
    "unorder_categoricals",
    "filter_outcome_causes",
    "assemble_cohort",
    "calendar_cut_points",
    "split_subject",
    "split_follow_up",
    "add_calendar_years",
    "add_follow_up_ages",
    "add_age_groups",
    "add_exposure_age_groups",
    "attach_baseline",
    "attach_exposure",
    "make_panel_dataset",
]
