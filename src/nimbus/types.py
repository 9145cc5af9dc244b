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
Core type definitions for Nimbus.

This module defines the pollutant enumeration, the reading that goes into
an assessment and the assessment that comes out, so that every part of the
package agrees on field names and ordering.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Callable, Mapping, TypeAlias

import pandas as pd

from .exceptions import InvalidReading


class PollutantKind(Enum):
    """
    The six pollutants scored by the AQI.

    Member order is the reporting order used everywhere a list of
    pollutants is produced.
    """

    CO = "CO"
    NO2 = "NO2"
    O3 = "O3"
    SO2 = "SO2"
    PM25 = "PM2.5"
    PM10 = "PM10"

    @property
    def label(self) -> str:
        """Display label, e.g. "PM2.5"."""
        return self.value

    @property
    def field(self) -> str:
        """Name of the PollutantReading attribute holding this pollutant."""
        return READING_FIELDS[self]


READING_FIELDS: dict[PollutantKind, str] = {
    PollutantKind.CO: "co",
    PollutantKind.NO2: "no2",
    PollutantKind.O3: "o3",
    PollutantKind.SO2: "so2",
    PollutantKind.PM25: "pm2_5",
    PollutantKind.PM10: "pm10",
}

# Wide-format column names, in reporting order
READING_COLUMNS = list(READING_FIELDS.values())


class Category(Enum):
    """US EPA AQI severity bands, least to most severe."""

    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY_FOR_SENSITIVE_GROUPS = "Unhealthy for Sensitive Groups"
    UNHEALTHY = "Unhealthy"
    VERY_UNHEALTHY = "Very Unhealthy"
    HAZARDOUS = "Hazardous"

    @property
    def label(self) -> str:
        return self.value

    @property
    def severity(self) -> int:
        """Zero-based position of the band (0 = Good, 5 = Hazardous)."""
        return list(Category).index(self)


def _check_concentration(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidReading(name, value, "must be a real number")
    value = float(value)
    if math.isnan(value):
        raise InvalidReading(name, value, "is NaN")
    if math.isinf(value):
        raise InvalidReading(name, value, "is infinite")
    if value < 0:
        raise InvalidReading(name, value, "is negative")
    return value


@dataclass(frozen=True)
class PollutantReading:
    """
    One set of pollutant concentrations, all in µg/m³.

    Every field is required and must be a finite, non-negative number.
    Invalid values raise InvalidReading at construction, so a reading that
    exists is always safe to assess.
    """

    co: float
    no2: float
    o3: float
    so2: float
    pm2_5: float
    pm10: float

    def __post_init__(self):
        for name in READING_COLUMNS:
            # Frozen dataclass: normalise numpy scalars etc. to plain floats
            object.__setattr__(
                self, name, _check_concentration(name, getattr(self, name))
            )

    def concentration(self, kind: PollutantKind) -> float:
        """Return the raw µg/m³ concentration for one pollutant."""
        return getattr(self, kind.field)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PollutantReading":
        """
        Build a reading from a mapping keyed by pollutant name.

        Keys may be field names ("pm2_5"), labels ("PM2.5") or any alias
        understood by standardise_pollutant(). Unrecognised keys are ignored.

        Raises:
            InvalidReading: If a pollutant is missing, is given under two keys,
                or has an invalid value
        """
        from .metrics.base import standardise_pollutant

        values: dict[str, Any] = {}
        keys: dict[str, Any] = {}
        for key, value in mapping.items():
            kind = standardise_pollutant(key)
            if kind is None:
                continue
            if kind.field in keys:
                raise InvalidReading(
                    kind.field,
                    value,
                    f"is given twice (as {keys[kind.field]!r} and {key!r})",
                )
            keys[kind.field] = key
            values[kind.field] = value

        for name in READING_COLUMNS:
            if name not in values:
                raise InvalidReading(name, None, "is missing")

        return cls(**values)


@dataclass(frozen=True)
class DominantPollutant:
    """A pollutant whose own sub-index reaches the dominant threshold."""

    pollutant: PollutantKind
    concentration: float  # Raw input concentration (µg/m³)
    sub_index: int


@dataclass(frozen=True)
class AirQualityAssessment:
    """Result of assessing one PollutantReading."""

    aqi: int
    category: Category
    dominant_pollutants: tuple[DominantPollutant, ...] = ()
    sub_indices: Mapping[PollutantKind, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict with a stable key order."""
        return {
            "aqi": self.aqi,
            "category": self.category.label,
            "dominant_pollutants": [
                {
                    "pollutant": d.pollutant.label,
                    "concentration": d.concentration,
                    "sub_index": d.sub_index,
                }
                for d in self.dominant_pollutants
            ],
            "sub_indices": {
                kind.label: self.sub_indices[kind]
                for kind in PollutantKind
                if kind in self.sub_indices
            },
        }


Transformer: TypeAlias = Callable[[pd.DataFrame], pd.DataFrame]
"""
A function that transforms a DataFrame (e.g., renaming columns, pivoting).

Args:
    df: Input DataFrame

Returns:
    pd.DataFrame: Transformed DataFrame
"""

# Long-format columns as produced by data-acquisition tools (one row per measurand)
LONG_COLUMNS = [
    "date_time",
    "measurand",
    "value",
    "units",
]
