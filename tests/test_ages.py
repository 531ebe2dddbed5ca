import pandas as pd
import pytest

from cohort_exposure_panel import add_age_groups, add_exposure_age_groups, add_follow_up_ages

BREAKS = [0, 50, 60, 70, 80, 120]
LABELS = ['<50', '50-59', '60-69', '70-79', '80+']


def test_follow_up_ages_are_fractional():
    panel = pd.DataFrame({
        'dob': pd.to_datetime(['1950-01-01']),
        'dstartfu': pd.to_datetime(['2001-01-01']),
        'dexit': pd.to_datetime(['2001-07-02']),
    })
    result = add_follow_up_ages(panel)

    start_days = (pd.Timestamp('2001-01-01') - pd.Timestamp('1950-01-01')).days
    assert result['agestartfu'].iloc[0] == pytest.approx(start_days / 365.25)
    assert result['ageexit'].iloc[0] - result['agestartfu'].iloc[0] == pytest.approx(182 / 365.25)


def test_age_groups_use_calendar_years():
    df = pd.DataFrame({
        'dob': pd.to_datetime(['1950-12-31', '1950-01-01', '1939-06-01']),
        'year': [2000, 2001, 2019],
    })
    result = add_age_groups(df, BREAKS, LABELS)

    # 2000 - 1950 = 50 even though the subject is still 49
    assert result['agegr'].astype(str).tolist() == ['<50', '50-59', '70-79']


def test_exposure_age_groups():
    exposure = pd.DataFrame({'eid': [1, 1, 2], 'year': [2005, 2012, 2005], 'pm25': [1.0, 2.0, 3.0]})
    cohort = pd.DataFrame({'eid': [1, 2], 'dob': pd.to_datetime(['1950-03-01', '1962-08-01'])})

    result = add_exposure_age_groups(exposure, cohort, BREAKS, LABELS)

    assert result['agegr'].astype(str).tolist() == ['50-59', '60-69', '<50']
    assert list(result.columns) == ['eid', 'year', 'pm25', 'agegr']
