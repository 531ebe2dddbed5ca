import logging

import numpy as np
import pandas as pd

from cohort_exposure_panel.errors import CategorizationError

logger = logging.getLogger(__name__)

QUINTILE_LABELS = [f'{q} quintile' for q in ['1st', '2nd', '3rd', '4th', '5th']]

DEFAULT_RULES = {
    'smkpackyear': {
        'breaks': [0, 0.5, 10, 30, 60, np.inf],
        'labels': ['0', '<=10', '10-30', '30-60', '>60'],
    },
    'wthratio': {
        'female_level': 'Female',
        'female_breaks': [0, 0.80, 0.85, 100],
        'male_breaks': [0, 0.95, 1.0, 100],
        'labels': ['low', 'medium', 'high'],
    },
    'quintiles': ['greenspace', 'tdi'],
}


def _cut(
    values: pd.Series,
    breaks: list,
    labels: list,
    include_lowest: bool = False
) -> pd.Series:
    """Bin `values` with right-closed intervals, failing on unbinnable values."""
    if len(breaks) != len(labels) + 1:
        raise ValueError(
            f"{values.name}: {len(breaks)} breaks do not fit {len(labels)} labels"
        )

    binned = pd.cut(
        values,
        bins=breaks,
        labels=labels,
        include_lowest=include_lowest,
        ordered=True
    )

    outside = values.notna() & binned.isna()
    if outside.any():
        raise CategorizationError(
            f"{values.name}: {outside.sum()} value(s) outside bins {list(breaks)}: "
            f"{sorted(values[outside].unique().tolist())[:10]}"
        )
    return binned


def cut_packyears(values: pd.Series, breaks: list, labels: list) -> pd.Series:
    """Bin smoking pack-years; the first bin includes zero."""
    return _cut(values, breaks, labels, include_lowest=True)


def cut_waist_height(
    values: pd.Series,
    sex: pd.Series,
    female_breaks: list,
    male_breaks: list,
    labels: list,
    female_level: str = 'Female'
) -> pd.Series:
    """Bin waist-to-height ratio with sex-specific thresholds.

    Args:
        values: Waist-to-height ratios.
        sex: Sex of each subject, aligned with `values`.
        female_breaks: Bin edges applied where `sex == female_level`.
        male_breaks: Bin edges applied to everyone else.
        labels: Bin labels, shared by both sets of edges.
        female_level: Value of `sex` that selects the female thresholds.

    Returns:
        Ordered categorical Series with the shared labels.
    """
    is_female = (sex == female_level).to_numpy()
    female = _cut(values.where(is_female), female_breaks, labels)
    male = _cut(values.where(~is_female), male_breaks, labels)

    return pd.Series(
        pd.Categorical(
            np.where(is_female, female.astype(object), male.astype(object)),
            categories=labels,
            ordered=True
        ),
        index=values.index,
        name=values.name
    )


def quintile_edges(values: pd.Series) -> np.ndarray:
    """Equal-frequency quintile edges of the observed distribution.

    Raises:
        CategorizationError: If ties collapse two edges into one, since
            such edges cannot be frozen.
    """
    edges = values.dropna().quantile(np.linspace(0, 1, 6)).to_numpy()
    if (np.diff(edges) <= 0).any():
        raise CategorizationError(
            f"{values.name}: tied values give duplicate quintile edges {edges.tolist()}"
        )
    return edges


def cut_quintiles(values: pd.Series, edges=None) -> pd.Series:
    """Bin `values` into quintiles.

    Without frozen `edges` the bins hold equal numbers of subjects,
    ranking tied values by row order. With frozen `edges`, values outside
    the outer edges fail.
    """
    if edges is not None:
        return _cut(values, list(edges), QUINTILE_LABELS, include_lowest=True)

    ranks = values.rank(method='first')
    codes = ((ranks - 1) * len(QUINTILE_LABELS) // ranks.count()).fillna(-1).astype('int')
    return pd.Series(
        pd.Categorical.from_codes(codes, categories=QUINTILE_LABELS, ordered=True),
        index=values.index,
        name=values.name
    )


def categorize_baseline(
    baseline: pd.DataFrame,
    rules: dict = None,
    edges: dict = None
) -> pd.DataFrame:
    """Add categorized versions of the continuous baseline covariates.

    Adds ``smkpackyearcat``, ``wthratiocat`` and one ``<name>cat`` column
    per quintile variable.

    Args:
        baseline: Baseline table with ``sex`` and the continuous covariates.
        rules: Binning rules, see ``DEFAULT_RULES``.
        edges: Optional frozen quintile edges keyed by column name.

    Returns:
        New baseline table with the categorized columns.

    Raises:
        CategorizationError: If a value falls outside every bin.
    """
    if rules is None:
        rules = DEFAULT_RULES
    if edges is None:
        edges = {}

    smk = rules['smkpackyear']
    wth = rules['wthratio']

    result = baseline.assign(
        smkpackyearcat=lambda x: cut_packyears(
            x['smkpackyear'], smk['breaks'], smk['labels']
        ),
        wthratiocat=lambda x: cut_waist_height(
            x['wthratio'],
            x['sex'],
            wth['female_breaks'],
            wth['male_breaks'],
            wth['labels'],
            wth.get('female_level', 'Female')
        ),
    )

    for var in rules['quintiles']:
        result[f'{var}cat'] = cut_quintiles(result[var], edges.get(var))

    logger.info("Categorized baseline covariates for %d subjects", len(result))
    return result


def relabel_levels(baseline: pd.DataFrame, level_maps: dict) -> pd.DataFrame:
    """Rename categorical levels from a configured lookup table.

    Args:
        baseline: Baseline table.
        level_maps: Column name to either a dict of old -> new labels or a
            list of new labels in the existing level order.

    Returns:
        New baseline table with renamed levels.

    Raises:
        ValueError: If a list of labels targets a column that is not
            categorical, since it has no level order to follow.
    """
    result = baseline.copy()
    for var, mapping in level_maps.items():
        if var not in result.columns:
            continue
        if not isinstance(result[var].dtype, pd.CategoricalDtype):
            if not isinstance(mapping, dict):
                raise ValueError(
                    f"{var}: positional labels need a categorical column, got {result[var].dtype}"
                )
            result[var] = result[var].astype('category')
        result[var] = result[var].cat.rename_categories(mapping)
    return result


def unorder_categoricals(baseline: pd.DataFrame) -> pd.DataFrame:
    """Turn ordered categoricals into unordered ones for model design matrices."""
    ordered = [
        col for col in baseline.select_dtypes('category')
        if baseline[col].cat.ordered
    ]
    return baseline.assign(
        **{col: baseline[col].cat.as_unordered() for col in ordered}
    )
