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
Base types, constants, and utilities for AQI calculations.

This module provides the foundation for the index implementations:
breakpoint tables and their interpolation, unit conversion and
pollutant name standardisation.
"""

import math
import warnings
from bisect import bisect_left
from dataclasses import dataclass
from typing import TypedDict

import pandas as pd

from ..types import LONG_COLUMNS, PollutantKind

# =============================================================================
# Types
# =============================================================================

UGM3 = "µg/m³"
PPM = "ppm"


class IndexInfo(TypedDict):
    """Metadata about an AQI index."""

    name: str  # Full name of the index
    short_name: str  # Abbreviated name
    country: str  # Country or region
    scale_min: int  # Minimum possible value
    scale_max: int  # Maximum possible value
    pollutants: list[str]  # Supported pollutants
    description: str  # Brief description
    url: str  # Reference URL
    source: str  # Regulatory source of the breakpoints
    version: str  # Revision of the breakpoints in use


@dataclass(frozen=True)
class BreakpointTable:
    """
    Piecewise-linear mapping from concentration to sub-index for one pollutant.

    `concentrations` are expressed in `unit`. Both sequences must have the
    same length and be strictly increasing.
    """

    kind: PollutantKind
    unit: str
    concentrations: tuple[float, ...]
    indices: tuple[int, ...]

    def __post_init__(self):
        if len(self.concentrations) != len(self.indices):
            raise ValueError(
                f"{self.kind.label} table has {len(self.concentrations)} "
                f"concentrations but {len(self.indices)} index values"
            )
        if len(self.concentrations) < 2:
            raise ValueError(f"{self.kind.label} table needs at least two points")
        for name, values in (
            ("concentrations", self.concentrations),
            ("indices", self.indices),
        ):
            if any(b <= a for a, b in zip(values, values[1:])):
                raise ValueError(
                    f"{self.kind.label} table {name} must be strictly increasing"
                )

    @property
    def floor(self) -> int:
        return self.indices[0]

    @property
    def ceiling(self) -> int:
        return self.indices[-1]


# =============================================================================
# Unit Conversion
# =============================================================================

# Molecular weights for gas pollutants (g/mol)
# Sources:
#   - NIST WebBook: https://webbook.nist.gov/chemistry/
#   - PubChem: https://pubchem.ncbi.nlm.nih.gov/
#
# Values (g/mol):
#   NO2: 46.0055 (NIST), rounded to 46.01
#   O3:  47.9982 (NIST), rounded to 48.00
#   SO2: 64.0638 (NIST), rounded to 64.07
#   CO:  28.0101 (NIST), rounded to 28.01
MOLECULAR_WEIGHTS = {
    PollutantKind.NO2: 46.01,
    PollutantKind.O3: 48.00,
    PollutantKind.SO2: 64.07,
    PollutantKind.CO: 28.01,
}

# Molar volume of an ideal gas at 25°C (298.15K) and 1 atm, in L/mol.
#   V = (1 mol × 0.082057 L·atm/(mol·K) × 298.15 K) / 1 atm = 24.465 L/mol
# 24.45 is the rounded value used by US EPA and UK DEFRA for ambient air.
MOLAR_VOLUME = 24.45


def _gas(pollutant: PollutantKind | str) -> PollutantKind:
    kind = standardise_pollutant(pollutant)
    if kind not in MOLECULAR_WEIGHTS:
        raise ValueError(
            f"Cannot convert {pollutant} between µg/m³ and a mixing ratio. "
            f"Supported pollutants: {[k.label for k in MOLECULAR_WEIGHTS]}"
        )
    return kind


def ppb_to_ugm3(concentration: float, pollutant: PollutantKind | str) -> float:
    """
    Convert concentration from ppb to µg/m³.

    Uses the formula: µg/m³ = ppb × (molecular_weight / molar_volume)
    at standard conditions (25°C, 1 atm).

    Example conversion factors (at 25°C, 1 atm):
        - NO2: 1 ppb = 1.88 µg/m³
        - O3:  1 ppb = 1.96 µg/m³
        - SO2: 1 ppb = 2.62 µg/m³
        - CO:  1 ppb = 1.15 µg/m³

    Raises:
        ValueError: If pollutant is not a gas with known molecular weight
    """
    return concentration * (MOLECULAR_WEIGHTS[_gas(pollutant)] / MOLAR_VOLUME)


def ugm3_to_ppb(concentration: float, pollutant: PollutantKind | str) -> float:
    """
    Convert concentration from µg/m³ to ppb.

    Uses the formula: ppb = µg/m³ × (molar_volume / molecular_weight)

    Raises:
        ValueError: If pollutant is not a gas with known molecular weight
    """
    return concentration * (MOLAR_VOLUME / MOLECULAR_WEIGHTS[_gas(pollutant)])


def ppm_to_ugm3(concentration: float, pollutant: PollutantKind | str) -> float:
    """Convert concentration from ppm to µg/m³."""
    return ppb_to_ugm3(concentration * 1000, pollutant)


def ugm3_to_ppm(concentration: float, pollutant: PollutantKind | str) -> float:
    """
    Convert concentration from µg/m³ to ppm.

    This is the conversion applied to CO, NO2, O3 and SO2 before the US EPA
    breakpoints are looked up, e.g. about 1146 µg/m³ of CO is 1 ppm.
    """
    return ugm3_to_ppb(concentration, pollutant) / 1000


def ensure_ugm3(
    concentration: float,
    pollutant: PollutantKind | str,
    current_unit: str,
    warn: bool = True,
) -> float:
    """
    Ensure concentration is in µg/m³, converting if necessary.

    Args:
        concentration: The concentration value
        pollutant: Pollutant name or kind
        current_unit: Current unit of the concentration
        warn: Whether to warn about conversions

    Returns:
        Concentration in µg/m³

    Raises:
        ValueError: If the unit is not recognised
    """
    unit_lower = current_unit.lower().strip()

    if unit_lower in ("ug/m3", "µg/m³", "ugm3", "µg/m3", "ug/m³"):
        return concentration

    if unit_lower in ("ppb", "parts per billion"):
        if warn:
            warnings.warn(
                f"Converting {pollutant} from ppb to µg/m³ for AQI calculation. "
                f"Conversion assumes standard conditions (25°C, 1 atm).",
                UserWarning,
                stacklevel=3,
            )
        return ppb_to_ugm3(concentration, pollutant)

    if unit_lower in ("ppm", "parts per million"):
        if warn:
            warnings.warn(
                f"Converting {pollutant} from ppm to µg/m³ for AQI calculation. "
                f"Conversion assumes standard conditions (25°C, 1 atm).",
                UserWarning,
                stacklevel=3,
            )
        return ppm_to_ugm3(concentration, pollutant)

    if unit_lower in ("mg/m3", "mg/m³"):
        if warn:
            warnings.warn(
                f"Converting {pollutant} from mg/m³ to µg/m³ for AQI calculation.",
                UserWarning,
                stacklevel=3,
            )
        return concentration * 1000

    # A guessed unit gives a plausible but wrong index, so refuse
    raise ValueError(f"Unknown unit '{current_unit}' for {pollutant}")


# =============================================================================
# Pollutant Standardisation
# =============================================================================

# Map common pollutant names to their kind
POLLUTANT_ALIASES = {
    # PM2.5 variants
    "pm2.5": PollutantKind.PM25,
    "pm25": PollutantKind.PM25,
    "pm2_5": PollutantKind.PM25,
    "pm 2.5": PollutantKind.PM25,
    "fine particulate": PollutantKind.PM25,
    "fine particles": PollutantKind.PM25,
    # PM10 variants
    "pm10": PollutantKind.PM10,
    "pm 10": PollutantKind.PM10,
    "coarse particulate": PollutantKind.PM10,
    # Ozone variants
    "o3": PollutantKind.O3,
    "ozone": PollutantKind.O3,
    # Nitrogen dioxide variants
    "no2": PollutantKind.NO2,
    "nitrogen dioxide": PollutantKind.NO2,
    "nitrogen_dioxide": PollutantKind.NO2,
    # Sulphur dioxide variants
    "so2": PollutantKind.SO2,
    "sulfur dioxide": PollutantKind.SO2,
    "sulphur dioxide": PollutantKind.SO2,
    "sulfur_dioxide": PollutantKind.SO2,
    "sulphur_dioxide": PollutantKind.SO2,
    # Carbon monoxide variants
    "co": PollutantKind.CO,
    "carbon monoxide": PollutantKind.CO,
    "carbon_monoxide": PollutantKind.CO,
}


def standardise_pollutant(pollutant: PollutantKind | str) -> PollutantKind | None:
    """
    Standardise a pollutant name to its PollutantKind.

    Matching is case-insensitive and ignores surrounding whitespace.

    Args:
        pollutant: Pollutant name in any common format, or a PollutantKind

    Returns:
        The matching PollutantKind, or None if not recognised
    """
    if isinstance(pollutant, PollutantKind):
        return pollutant
    if not isinstance(pollutant, str):
        return None
    return POLLUTANT_ALIASES.get(pollutant.strip().lower())


# =============================================================================
# Breakpoint Interpolation
# =============================================================================


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded away from zero.

    Python's round() uses banker's rounding (round(402.5) == 402), which
    does not match how AQI values are published.
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def interpolate(concentration: float, table: BreakpointTable) -> int:
    """
    Calculate a sub-index by linear interpolation over a breakpoint table.

    This is the standard EPA-style calculation:

    I = I_lo + (C - C_lo) * (I_hi - I_lo) / (C_hi - C_lo)

    Concentrations at or below the first breakpoint return the table floor,
    and at or above the last breakpoint return the table ceiling. A
    concentration equal to a breakpoint returns that breakpoint's index
    exactly.

    Args:
        concentration: Pollutant concentration, in the table's unit
        table: Breakpoint table for the pollutant

    Returns:
        Rounded integer sub-index

    Raises:
        ValueError: If the concentration is NaN or infinite
    """
    if not math.isfinite(concentration):
        raise ValueError(
            f"Cannot interpolate {table.kind.label}: concentration "
            f"{concentration!r} is not a finite number"
        )

    xs = table.concentrations
    ys = table.indices

    if concentration <= xs[0]:
        return ys[0]
    if concentration >= xs[-1]:
        return ys[-1]

    # Smallest i with concentration <= xs[i]
    i = bisect_left(xs, concentration)
    if concentration == xs[i]:
        return ys[i]

    value = ys[i - 1] + (concentration - xs[i - 1]) * (ys[i] - ys[i - 1]) / (
        xs[i] - xs[i - 1]
    )
    return round_half_up(value)


# =============================================================================
# Data Validation
# =============================================================================


def validate_data(df: pd.DataFrame) -> None:
    """
    Validate that a long-format DataFrame has the columns needed for pivoting.

    Raises:
        ValueError: If required columns are missing
    """
    missing = set(LONG_COLUMNS) - set(df.columns)

    if missing:
        raise ValueError(
            f"DataFrame missing required columns for AQI calculation: {missing}. "
            f"Expected columns: {LONG_COLUMNS}"
        )
