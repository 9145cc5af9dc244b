# Nimbus: assess air quality readings against the US EPA AQI
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Air Quality Index assessment.

This module turns pollutant readings into a US EPA AQI value, a severity
category and the list of pollutants responsible for it.

Assessment is a pure function of the reading: the breakpoint tables are
built once when the package is imported and only read afterwards, so the
functions here can be called from any number of threads without locking.

Quick Start:
    >>> from nimbus import PollutantReading, metrics
    >>>
    >>> reading = PollutantReading(
    ...     co=230.3, no2=13.5, o3=62.9, so2=2.1, pm2_5=200.0, pm10=210.0
    ... )
    >>> assessment = metrics.assess_air_quality(reading)
    >>> assessment.aqi, assessment.category.label
    (275, 'Very Unhealthy')
    >>>
    >>> # Many readings at once
    >>> results = metrics.assess_dataframe(df)
"""

import logging
from typing import Any, Mapping

import pandas as pd

from ..decorators import with_logging
from ..exceptions import InvalidReading
from ..transforms import (
    compose,
    convert_units_to_ugm3,
    pivot_measurands,
    standardise_measurands,
    standardise_reading_columns,
)
from ..types import (
    READING_COLUMNS,
    AirQualityAssessment,
    DominantPollutant,
    PollutantKind,
    PollutantReading,
)
from .base import IndexInfo, validate_data
from .indices import get_index
from .indices import list_indices as _list_indices
from .indices import us_epa

logger = logging.getLogger(__name__)

__all__ = [
    # Main API functions
    "assess_air_quality",
    "sub_indices",
    "describe_air_quality",
    "assess_dataframe",
    "readings_from_long",
    "list_indices",
    "get_index_info",
    # Types
    "AirQualityAssessment",
    "IndexInfo",
]


# =============================================================================
# Public API
# =============================================================================


def list_indices() -> list[str]:
    """
    List all available AQI indices.

    Returns:
        List of index keys (e.g., ["US_EPA"])
    """
    return _list_indices()


def get_index_info(index: str) -> IndexInfo | None:
    """
    Get detailed information about an AQI index.

    Args:
        index: Index key (e.g., "US_EPA")

    Returns:
        IndexInfo dict with name, country, scale, pollutants, description, url
        or None if index not found
    """
    return get_index(index)


def _as_reading(reading: PollutantReading | Mapping[str, Any]) -> PollutantReading:
    if isinstance(reading, PollutantReading):
        return reading
    if isinstance(reading, Mapping):
        return PollutantReading.from_mapping(reading)
    raise TypeError(
        f"Expected a PollutantReading or mapping, got {type(reading).__name__}"
    )


def sub_indices(
    reading: PollutantReading | Mapping[str, Any],
) -> dict[PollutantKind, int]:
    """
    Calculate the sub-index of every pollutant in a reading.

    Returns:
        Dict of sub-indices keyed by PollutantKind, in reporting order
        (CO, NO2, O3, SO2, PM2.5, PM10)

    Raises:
        InvalidReading: If the reading is incomplete or has invalid values
    """
    reading = _as_reading(reading)
    return {
        kind: us_epa.sub_index_from_ugm3(reading.concentration(kind), kind)
        for kind in PollutantKind
    }


def assess_air_quality(
    reading: PollutantReading | Mapping[str, Any],
) -> AirQualityAssessment:
    """
    Assess a single reading.

    The AQI is the highest of the six sub-indices, never an average. Every
    pollutant whose own sub-index is at least 100 is listed as dominant,
    with its raw µg/m³ concentration, in reporting order.

    Args:
        reading: A PollutantReading, or a mapping accepted by
                 PollutantReading.from_mapping()

    Returns:
        AirQualityAssessment with aqi, category, dominant_pollutants and
        sub_indices

    Raises:
        InvalidReading: If a concentration is missing, negative, NaN or infinite
        UnknownPollutant: If a pollutant has no breakpoint table

    Example:
        >>> result = assess_air_quality(
        ...     {"co": 0, "no2": 0, "o3": 0, "so2": 0, "pm2_5": 200, "pm10": 0}
        ... )
        >>> [(d.pollutant.label, d.concentration) for d in result.dominant_pollutants]
        [('PM2.5', 200.0)]
    """
    reading = _as_reading(reading)
    indices = sub_indices(reading)

    aqi = max(indices.values())
    dominant = tuple(
        DominantPollutant(kind, reading.concentration(kind), value)
        for kind, value in indices.items()
        if value >= us_epa.DOMINANT_THRESHOLD
    )
    assessment = AirQualityAssessment(
        aqi=aqi,
        category=us_epa.classify(aqi),
        dominant_pollutants=dominant,
        sub_indices=indices,
    )

    logger.debug(
        f"Assessed reading: AQI {aqi} ({assessment.category.label})",
        extra={"aqi": aqi, "dominant": [d.pollutant.label for d in dominant]},
    )
    return assessment


def describe_air_quality(
    reading: PollutantReading | Mapping[str, Any],
) -> dict[str, Any]:
    """
    Summarise a reading as plain values for display.

    Returns:
        Dict with:
            aqi: Overall AQI
            category: Category label
            main_contributors: e.g. "PM2.5: 200 µg/m³, PM10: 300 µg/m³",
                or "" when the AQI is 100 or below
    """
    assessment = assess_air_quality(reading)

    contributors = ""
    if assessment.aqi > 100:
        contributors = ", ".join(
            f"{d.pollutant.label}: {d.concentration:.0f} µg/m³"
            for d in assessment.dominant_pollutants
        )

    return {
        "aqi": assessment.aqi,
        "category": assessment.category.label,
        "main_contributors": contributors,
    }


# =============================================================================
# DataFrame API
# =============================================================================

RESULT_COLUMNS = [f"{name}_aqi" for name in READING_COLUMNS] + [
    "aqi",
    "category",
    "dominant_pollutants",
]


@with_logging()
def assess_dataframe(data: pd.DataFrame) -> pd.DataFrame:
    """
    Assess every row of a wide DataFrame of readings.

    Args:
        data: DataFrame with one row per reading and a µg/m³ column for each
              pollutant. Column names may be field names ("pm2_5") or any
              recognised alias ("PM2.5", "ozone", ...). Other columns are
              ignored.

    Returns:
        DataFrame with the same index as `data` and columns:
            co_aqi, no2_aqi, o3_aqi, so2_aqi, pm2_5_aqi, pm10_aqi,
            aqi, category, dominant_pollutants

        dominant_pollutants is a comma-separated list of labels
        (e.g. "PM2.5, PM10"), empty when no pollutant reaches 100.

    Raises:
        ValueError: If a pollutant column is missing or appears under two names
        InvalidReading: For the first row with a missing or invalid value;
                        the message names the row
    """
    renamed = standardise_reading_columns()(data)
    clashes = renamed.columns[renamed.columns.duplicated()].unique()
    clashes = [col for col in clashes if col in READING_COLUMNS]
    if clashes:
        sources = [
            orig for orig, new in zip(data.columns, renamed.columns) if new in clashes
        ]
        raise ValueError(
            f"DataFrame has more than one column for the same pollutant: {sources}"
        )
    data = renamed

    missing = [col for col in READING_COLUMNS if col not in data.columns]
    if missing:
        raise ValueError(
            f"DataFrame missing pollutant columns for AQI calculation: {missing}"
        )

    rows = []
    for label, values in zip(
        data.index, data[READING_COLUMNS].itertuples(index=False, name=None)
    ):
        try:
            reading = PollutantReading(*values)
        except InvalidReading as e:
            raise InvalidReading(
                e.field, e.value, f"{e.reason} (row {label!r})"
            ) from e

        assessment = assess_air_quality(reading)
        row = {
            f"{kind.field}_aqi": value
            for kind, value in assessment.sub_indices.items()
        }
        row["aqi"] = assessment.aqi
        row["category"] = assessment.category.label
        row["dominant_pollutants"] = ", ".join(
            d.pollutant.label for d in assessment.dominant_pollutants
        )
        rows.append(row)

    logger.info(f"Assessed {len(rows)} readings")
    return pd.DataFrame(rows, index=data.index, columns=RESULT_COLUMNS)


@with_logging()
def readings_from_long(
    data: pd.DataFrame,
    index: list[str] | None = None,
) -> pd.DataFrame:
    """
    Convert long-format measurements into a wide frame of readings.

    Args:
        data: DataFrame with columns date_time, measurand, value, units
              (and usually site_code), one row per measurement
        index: Columns identifying a reading. Defaults to whichever of
               site_code and date_time are present.

    Returns:
        DataFrame indexed by `index` with one µg/m³ column per pollutant,
        ready for assess_dataframe(). Pollutants without data are NaN.

    Raises:
        ValueError: If required columns are missing or a unit is unknown
    """
    validate_data(data)
    to_readings = compose(
        standardise_measurands(),
        convert_units_to_ugm3(),
        pivot_measurands(index=index),
    )
    return to_readings(data)
