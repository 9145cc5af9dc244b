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
US EPA Air Quality Index (AQI) implementation.

The US EPA AQI uses a 0-500 scale divided into six categories:
Good (0-50), Moderate (51-100), Unhealthy for Sensitive Groups (101-150),
Unhealthy (151-200), Very Unhealthy (201-300), Hazardous (301-500).

Reference: https://www.airnow.gov/aqi/aqi-basics/
CFR: 40 CFR Appendix G to Part 58

Readings arrive in µg/m³. Gases are converted to ppm before lookup, so
every gas table here is expressed in ppm (the EPA publishes SO2 and NO2 in
ppb; those values are divided by 1000). PM2.5 and PM10 are looked up in
µg/m³ directly.
"""

from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from ...exceptions import UnknownPollutant
from ...types import Category, PollutantKind
from ..base import (
    PPM,
    UGM3,
    BreakpointTable,
    IndexInfo,
    interpolate,
    standardise_pollutant,
    ugm3_to_ppm,
)
from . import register_index

# =============================================================================
# Index Metadata
# =============================================================================

INDEX_INFO: IndexInfo = {
    "name": "US EPA Air Quality Index",
    "short_name": "AQI",
    "country": "United States",
    "scale_min": 0,
    "scale_max": 500,
    "pollutants": [kind.label for kind in PollutantKind],
    "description": (
        "The US EPA Air Quality Index (AQI) is a nationally uniform index for "
        "reporting daily air quality. It uses a 0-500 scale with six categories. "
        "Updated in May 2024 with stricter PM2.5 standards."
    ),
    "url": "https://www.airnow.gov/aqi/aqi-basics/",
    "source": "40 CFR Part 58, Appendix G - Uniform Air Quality Index (AQI) and Daily Reporting",
    "version": "May 6, 2024 (PM2.5 breakpoints revised)",
}

register_index("US_EPA", INDEX_INFO)


# =============================================================================
# Category Definitions
# =============================================================================

# Upper bound (inclusive) of each band; anything above the last is Hazardous
CATEGORY_BANDS = (
    (50, Category.GOOD),
    (100, Category.MODERATE),
    (150, Category.UNHEALTHY_FOR_SENSITIVE_GROUPS),
    (200, Category.UNHEALTHY),
    (300, Category.VERY_UNHEALTHY),
)

COLORS = {
    Category.GOOD: "#00E400",  # Green
    Category.MODERATE: "#FFFF00",  # Yellow
    Category.UNHEALTHY_FOR_SENSITIVE_GROUPS: "#FF7E00",  # Orange
    Category.UNHEALTHY: "#FF0000",  # Red
    Category.VERY_UNHEALTHY: "#8F3F97",  # Purple
    Category.HAZARDOUS: "#7E0023",  # Maroon
}

HEALTH_MESSAGES = {
    Category.GOOD: (
        "Air quality is satisfactory, and air pollution poses little or no risk."
    ),
    Category.MODERATE: (
        "Air quality is acceptable. However, there may be a risk for some people, "
        "particularly those who are unusually sensitive to air pollution."
    ),
    Category.UNHEALTHY_FOR_SENSITIVE_GROUPS: (
        "Members of sensitive groups may experience health effects. "
        "The general public is less likely to be affected."
    ),
    Category.UNHEALTHY: (
        "Some members of the general public may experience health effects; "
        "members of sensitive groups may experience more serious health effects."
    ),
    Category.VERY_UNHEALTHY: (
        "Health alert: The risk of health effects is increased for everyone."
    ),
    Category.HAZARDOUS: (
        "Health warning of emergency conditions: everyone is more likely to be affected."
    ),
}

# A pollutant at or above this sub-index is reported as a main contributor
DOMINANT_THRESHOLD = 100


# =============================================================================
# Breakpoints
# =============================================================================
#
# Source: 40 CFR Part 58, Appendix G
# URL: https://www.ecfr.gov/current/title-40/chapter-I/subchapter-C/part-58/appendix-Appendix%20G%20to%20Part%2058
#
# Version: May 6, 2024 (effective date of PM2.5 revisions)
#
# Each band (C_lo, C_hi, I_lo, I_hi) contributes both of its endpoints, so
# a table is a single continuous, strictly increasing sequence of points.
# Concentrations falling in the gap between two published bands (e.g.
# 9.05 µg/m³ PM2.5) interpolate between them instead of being truncated.
# =============================================================================


def _make_table(
    kind: PollutantKind,
    unit: str,
    bands: Sequence[tuple[float, float, int, int]],
) -> BreakpointTable:
    """Flatten EPA bands into a BreakpointTable."""
    concentrations: list[float] = []
    indices: list[int] = []
    for low_conc, high_conc, low_aqi, high_aqi in bands:
        concentrations.extend((low_conc, high_conc))
        indices.extend((low_aqi, high_aqi))
    return BreakpointTable(kind, unit, tuple(concentrations), tuple(indices))


# PM2.5 (µg/m³, 24-hour) - Updated May 2024
PM25_TABLE = _make_table(
    PollutantKind.PM25,
    UGM3,
    [
        (0.0, 9.0, 0, 50),
        (9.1, 35.4, 51, 100),
        (35.5, 55.4, 101, 150),
        (55.5, 125.4, 151, 200),
        (125.5, 225.4, 201, 300),
        (225.5, 325.4, 301, 400),
        (325.5, 500.4, 401, 500),
    ],
)

# PM10 (µg/m³, 24-hour)
PM10_TABLE = _make_table(
    PollutantKind.PM10,
    UGM3,
    [
        (0, 54, 0, 50),
        (55, 154, 51, 100),
        (155, 254, 101, 150),
        (255, 354, 151, 200),
        (355, 424, 201, 300),
        (425, 504, 301, 400),
        (505, 604, 401, 500),
    ],
)

# O3 (ppm). 8-hour bands up to AQI 300; the 8-hour standard has no
# breakpoints above 0.200 ppm, so 301-500 uses the 1-hour bands.
O3_TABLE = _make_table(
    PollutantKind.O3,
    PPM,
    [
        (0.000, 0.054, 0, 50),
        (0.055, 0.070, 51, 100),
        (0.071, 0.085, 101, 150),
        (0.086, 0.105, 151, 200),
        (0.106, 0.200, 201, 300),
        (0.405, 0.504, 301, 400),
        (0.505, 0.604, 401, 500),
    ],
)

# CO (ppm, 8-hour)
CO_TABLE = _make_table(
    PollutantKind.CO,
    PPM,
    [
        (0.0, 4.4, 0, 50),
        (4.5, 9.4, 51, 100),
        (9.5, 12.4, 101, 150),
        (12.5, 15.4, 151, 200),
        (15.5, 30.4, 201, 300),
        (30.5, 40.4, 301, 400),
        (40.5, 50.4, 401, 500),
    ],
)

# SO2 (ppm). 1-hour bands up to AQI 200 (0-304 ppb), 24-hour bands above.
SO2_TABLE = _make_table(
    PollutantKind.SO2,
    PPM,
    [
        (0.000, 0.035, 0, 50),
        (0.036, 0.075, 51, 100),
        (0.076, 0.185, 101, 150),
        (0.186, 0.304, 151, 200),
        (0.305, 0.604, 201, 300),
        (0.605, 0.804, 301, 400),
        (0.805, 1.004, 401, 500),
    ],
)

# NO2 (ppm, 1-hour); published as 0-2049 ppb
NO2_TABLE = _make_table(
    PollutantKind.NO2,
    PPM,
    [
        (0.000, 0.053, 0, 50),
        (0.054, 0.100, 51, 100),
        (0.101, 0.360, 101, 150),
        (0.361, 0.649, 151, 200),
        (0.650, 1.249, 201, 300),
        (1.250, 1.649, 301, 400),
        (1.650, 2.049, 401, 500),
    ],
)

TABLES: Mapping[PollutantKind, BreakpointTable] = MappingProxyType(
    {
        PollutantKind.CO: CO_TABLE,
        PollutantKind.NO2: NO2_TABLE,
        PollutantKind.O3: O3_TABLE,
        PollutantKind.SO2: SO2_TABLE,
        PollutantKind.PM25: PM25_TABLE,
        PollutantKind.PM10: PM10_TABLE,
    }
)


# =============================================================================
# Unit Conversion
# =============================================================================

Converter = Callable[[float, PollutantKind], float]


def _unchanged(concentration: float, kind: PollutantKind) -> float:
    return concentration


# Conversion from µg/m³ applied before lookup, tagged with the unit it yields.
# The tag must match the unit of the table the result is looked up in.
CONVERSIONS: Mapping[PollutantKind, tuple[str, Converter]] = MappingProxyType(
    {
        PollutantKind.CO: (PPM, ugm3_to_ppm),
        PollutantKind.NO2: (PPM, ugm3_to_ppm),
        PollutantKind.O3: (PPM, ugm3_to_ppm),
        PollutantKind.SO2: (PPM, ugm3_to_ppm),
        PollutantKind.PM25: (UGM3, _unchanged),
        PollutantKind.PM10: (UGM3, _unchanged),
    }
)


def check_tables(
    tables: Mapping[PollutantKind, BreakpointTable] = TABLES,
    conversions: Mapping[PollutantKind, tuple[str, Converter]] = CONVERSIONS,
) -> None:
    """
    Check that every pollutant has a table and a conversion with matching units.

    Runs when this module is imported.

    Raises:
        RuntimeError: If a pollutant is missing a table or conversion, a table
            is registered under the wrong pollutant, or a conversion yields a
            different unit from the table it feeds
    """
    for kind in PollutantKind:
        table = tables.get(kind)
        conversion = conversions.get(kind)
        if table is None or conversion is None:
            raise RuntimeError(
                f"{kind.label} is missing a breakpoint table or conversion"
            )
        if table.kind is not kind:
            raise RuntimeError(
                f"Table for {kind.label} is defined for {table.kind.label}"
            )
        unit, _ = conversion
        if table.unit != unit:
            raise RuntimeError(
                f"{kind.label} conversion yields {unit} but its breakpoint "
                f"table is in {table.unit}"
            )
        if (
            table.floor != INDEX_INFO["scale_min"]
            or table.ceiling != INDEX_INFO["scale_max"]
        ):
            raise RuntimeError(
                f"{kind.label} table spans {table.floor}-{table.ceiling}, "
                f"expected {INDEX_INFO['scale_min']}-{INDEX_INFO['scale_max']}"
            )


check_tables()


# =============================================================================
# Calculation Functions
# =============================================================================


def get_unit(kind: PollutantKind) -> str:
    """Return the unit a pollutant's breakpoints are expressed in."""
    try:
        return TABLES[kind].unit
    except KeyError:
        raise UnknownPollutant(kind) from None


def to_canonical(concentration: float, kind: PollutantKind) -> float:
    """Convert a µg/m³ concentration into the unit of the pollutant's table."""
    try:
        _, converter = CONVERSIONS[kind]
    except KeyError:
        raise UnknownPollutant(kind) from None
    return converter(concentration, kind)


def sub_index(concentration: float, kind: PollutantKind) -> int:
    """
    Calculate the sub-index for one pollutant.

    Args:
        concentration: Concentration in the pollutant's table unit
                      (ppm for gases, µg/m³ for PM)
        kind: Pollutant to score

    Returns:
        Integer sub-index (0-500)

    Raises:
        UnknownPollutant: If no table is registered for the pollutant
    """
    table = TABLES.get(kind)
    if table is None:
        raise UnknownPollutant(kind)
    return interpolate(concentration, table)


def sub_index_from_ugm3(concentration: float, kind: PollutantKind) -> int:
    """Convert a µg/m³ concentration and return its sub-index."""
    return sub_index(to_canonical(concentration, kind), kind)


def classify(aqi: int) -> Category:
    """
    Return the category for an overall AQI value.

    Raises:
        ValueError: If the value is negative
    """
    if aqi < 0:
        raise ValueError(f"AQI cannot be negative, got {aqi}")
    for upper, category in CATEGORY_BANDS:
        if aqi <= upper:
            return category
    return Category.HAZARDOUS


def get_color(category: Category) -> str:
    """Return the EPA hex colour for a category."""
    return COLORS[category]


def get_health_message(category: Category) -> str:
    """Return the EPA health message for a category."""
    return HEALTH_MESSAGES[category]


# =============================================================================
# NowCast Algorithm
# =============================================================================


def calculate_nowcast(
    hourly_values: Sequence[float | None],
    pollutant: PollutantKind | str,
) -> float | None:
    """
    Calculate NowCast concentration from hourly values.

    The NowCast algorithm produces a weighted average that responds faster
    to changing air quality conditions than a simple 12-hour average. Use it
    to turn a run of hourly observations into the concentration of a
    PollutantReading.

    Args:
        hourly_values: List of up to 12 hourly concentrations, most recent first.
                      None values indicate missing data.
        pollutant: PM2.5, PM10 or O3

    Returns:
        NowCast concentration, or None if insufficient data

    Raises:
        ValueError: If the pollutant has no NowCast definition

    Reference:
        https://www.epa.gov/sites/default/files/2018-01/documents/nowcastfactsheet.pdf
    """
    kind = standardise_pollutant(pollutant)
    if kind not in (PollutantKind.PM25, PollutantKind.PM10, PollutantKind.O3):
        raise ValueError(f"NowCast is not defined for {pollutant}")

    hourly_values = list(hourly_values[:12])
    hourly_values += [None] * (3 - len(hourly_values))

    # Need at least 2 of the 3 most recent hours
    if sum(1 for v in hourly_values[:3] if v is not None) < 2:
        return None

    values = [(i, v) for i, v in enumerate(hourly_values) if v is not None]

    concentrations = [v for _, v in values]
    c_min = min(concentrations)
    c_max = max(concentrations)

    if c_max == 0:
        return 0.0

    w_star = c_min / c_max

    # Minimum weight factor of 0.5 for PM, none for O3
    if kind is PollutantKind.O3:
        w = w_star
    else:
        w = max(w_star, 0.5)

    numerator = 0.0
    denominator = 0.0
    for i, c in values:
        weight = w**i
        numerator += weight * c
        denominator += weight

    if denominator == 0:
        return None

    return numerator / denominator
