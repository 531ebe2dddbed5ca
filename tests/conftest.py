import pandas as pd
import pytest


@pytest.fixture
def cohort():
    return pd.DataFrame({
        'eid': [1, 2],
        'dob': pd.to_datetime(['1950-01-01', '1955-05-05']),
        'asscentre': ['Leeds', 'Glasgow'],
        'dstartfu': pd.to_datetime(['2000-06-01', '2000-02-01']),
        'dendfu': pd.to_datetime(['2003-06-01', '2005-01-01']),
    })


@pytest.fixture
def outcome():
    return pd.DataFrame({
        'eid': [2, 99],
        'devent': pd.to_datetime(['2002-03-15', '2001-01-01']),
        'icd10': ['I21', 'C34'],
    })


@pytest.fixture
def baseline():
    return pd.DataFrame({
        'eid': [1, 2],
        'sex': ['Female', 'Male'],
        'asscentre': ['Leeds', 'Glasgow'],
        'smkpackyear': [0.0, 22.5],
        'wthratio': [0.82, 0.97],
        'greenspace': [12.0, 48.0],
        'tdi': [-3.1, 2.4],
    })


@pytest.fixture
def exposure():
    years = list(range(1999, 2005))
    return pd.DataFrame({
        'eid': [1] * len(years) + [2] * len(years),
        'year': years * 2,
        'pm25': [10.0, 12.0, 11.0, 9.0, 8.0, 7.0] + [14.0, 13.0, 15.0, 12.0, 11.0, 10.0],
    })


@pytest.fixture
def config():
    return {
        'lag': 1,
        'exposure_column': 'pm25',
        'icd_prefixes': list('ABCDEFGHIJKLMNOPQR'),
        'age_breaks': [0, 50, 60, 70, 80, 120],
        'age_labels': ['<50', '50-59', '60-69', '70-79', '80+'],
    }
