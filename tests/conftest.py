"""
Pytest configuration and shared fixtures.

This module provides common fixtures and utilities used across all tests.
"""

from datetime import datetime

import pandas as pd
import pytest

from nimbus.types import PollutantReading

# ============================================================================
# Reading Fixtures
# ============================================================================


@pytest.fixture
def clean_reading():
    """A reading with every pollutant at zero."""
    return PollutantReading(co=0.0, no2=0.0, o3=0.0, so2=0.0, pm2_5=0.0, pm10=0.0)


@pytest.fixture
def smoky_reading():
    """
    A wildfire-smoke style reading: particulates high, gases low.

    PM2.5 200 µg/m³ gives a sub-index of 275, PM10 210 µg/m³ gives 128.
    """
    return PollutantReading(
        co=230.3, no2=13.5, o3=62.9, so2=2.1, pm2_5=200.0, pm10=210.0
    )


@pytest.fixture
def zero_values():
    """Mapping of every reading field to zero, for building variations."""
    return {"co": 0.0, "no2": 0.0, "o3": 0.0, "so2": 0.0, "pm2_5": 0.0, "pm10": 0.0}


# ============================================================================
# Sample DataFrames
# ============================================================================


@pytest.fixture
def sample_wide_df():
    """
    Wide DataFrame with one row per reading, using display-style column names.

    This mimics what a data-acquisition tool would hand over after fetching
    a feed of current conditions.
    """
    return pd.DataFrame(
        {
            "site_code": ["CLEAN", "SMOKY", "BUSY_ROAD"],
            "CO": [0.0, 230.3, 20000.0],
            "NO2": [0.0, 13.5, 40.0],
            "O3": [0.0, 62.9, 30.0],
            "SO2": [0.0, 2.1, 5.0],
            "PM2.5": [0.0, 200.0, 12.0],
            "PM10": [0.0, 210.0, 300.0],
        },
        index=pd.Index(["a", "b", "c"], name="reading"),
    )


@pytest.fixture
def sample_long_df():
    """
    Long DataFrame with one row per measurement.

    Two sites at one timestamp; NO2 at site X is reported in ppb and a
    benzene row is included that should be skipped.
    """
    ts = datetime(2024, 6, 1, 12, 0)
    rows = [
        ("X", "CO", 230.3, "ug/m3"),
        ("X", "no2", 100.0, "ppb"),
        ("X", "Ozone", 62.9, "ug/m3"),
        ("X", "SO2", 2.1, "ug/m3"),
        ("X", "PM2.5", 200.0, "ug/m3"),
        ("X", "PM10", 210.0, "ug/m3"),
        ("X", "Benzene", 1.2, "ug/m3"),
        ("Y", "CO", 100.0, "ug/m3"),
        ("Y", "NO2", 10.0, "ug/m3"),
        ("Y", "O3", 20.0, "ug/m3"),
        ("Y", "SO2", 1.0, "ug/m3"),
        ("Y", "PM2.5", 4.0, "ug/m3"),
        ("Y", "PM2.5", 6.0, "ug/m3"),
        ("Y", "PM10", 10.0, "ug/m3"),
    ]
    return pd.DataFrame(
        [
            {
                "site_code": site,
                "date_time": ts,
                "measurand": measurand,
                "value": value,
                "units": units,
            }
            for site, measurand, value, units in rows
        ]
    )
