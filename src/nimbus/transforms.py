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
Composable DataFrame transformation functions.

These turn measurement tables into the wide, µg/m³ frame that
metrics.assess_dataframe() expects: one row per reading, one column per
pollutant field (co, no2, o3, so2, pm2_5, pm10).

All transformer functions follow the pattern:
    - Take configuration as arguments
    - Return a function that transforms a DataFrame
    - Are pure (no side effects)
    - Are composable

Example:
    >>> to_readings = compose(
    ...     standardise_measurands(),
    ...     convert_units_to_ugm3(),
    ...     pivot_measurands(index=["site_code", "date_time"]),
    ... )
    >>> wide = to_readings(long_df)
"""

import warnings
from functools import reduce
from typing import Callable

import pandas as pd

from .metrics.base import UGM3, ensure_ugm3, standardise_pollutant
from .types import READING_COLUMNS, Transformer


def pipe(df: pd.DataFrame, *functions: Transformer) -> pd.DataFrame:
    """
    Apply a series of transformation functions to a DataFrame in sequence.

    Example:
        >>> result = pipe(
        ...     df,
        ...     rename_columns({"pollutant": "measurand"}),
        ...     standardise_measurands(),
        ... )
    """
    return reduce(lambda data, func: func(data), functions, df)


def compose(*functions: Transformer) -> Transformer:
    """Compose multiple transformer functions into a single function."""

    def composed(df: pd.DataFrame) -> pd.DataFrame:
        return pipe(df, *functions)

    return composed


def rename_columns(mapping: dict[str, str]) -> Transformer:
    """Return a function that renames DataFrame columns."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df.rename(columns=mapping)

    return transform


def filter_rows(predicate: Callable[[pd.DataFrame], pd.Series]) -> Transformer:
    """
    Return a function that filters DataFrame rows based on a condition.

    Example:
        >>> transform = filter_rows(lambda df: df["value"].notna())
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df[predicate(df)]

    return transform


def select_columns(*columns: str) -> Transformer:
    """
    Return a function that selects only specified columns from a DataFrame.

    Columns that don't exist are ignored.
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        cols_to_select = [col for col in columns if col in df.columns]
        return df[cols_to_select]

    return transform


def standardise_measurands(column: str = "measurand") -> Transformer:
    """
    Return a function that maps measurand names onto reading field names.

    "PM2.5", "pm25" and "fine particulate" all become "pm2_5", and so on.
    Rows whose measurand is not one of the six AQI pollutants are dropped
    with a UserWarning.

    Args:
        column: Column holding the measurand names

    Returns:
        Transformer: Function that standardises the measurand column
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        mapping = {}
        unknown = set()
        for name in df[column].unique():
            kind = standardise_pollutant(name)
            if kind is None:
                unknown.add(name)
            else:
                mapping[name] = kind.field

        if unknown:
            warnings.warn(
                f"Unknown pollutants will be skipped: {sorted(map(str, unknown))}",
                UserWarning,
                stacklevel=2,
            )

        known = df[df[column].isin(list(mapping))]
        return known.assign(**{column: known[column].map(mapping)})

    return transform


def standardise_reading_columns() -> Transformer:
    """
    Return a function that renames wide pollutant columns to reading field names.

    Columns that are not recognised pollutant names are left untouched.

    Example:
        >>> transform = standardise_reading_columns()
        >>> transform(df).columns  # "PM2.5" -> "pm2_5", "Ozone" -> "o3"
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        mapping = {}
        for col in df.columns:
            kind = standardise_pollutant(col) if isinstance(col, str) else None
            if kind is not None:
                mapping[col] = kind.field
        return df.rename(columns=mapping)

    return transform


def convert_units_to_ugm3(
    value_column: str = "value",
    unit_column: str = "units",
    measurand_column: str = "measurand",
    warn: bool = True,
) -> Transformer:
    """
    Return a function that converts every value in long-format data to µg/m³.

    Conversions assume standard conditions (25°C, 1 atm). One UserWarning is
    raised per measurand/unit pair that needed converting.

    Raises:
        ValueError: If a unit is not recognised or cannot apply to the
            measurand (e.g. PM2.5 in ppb)
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        values = df[value_column].astype(float)
        pairs = df[[measurand_column, unit_column]].drop_duplicates()
        for measurand, unit in pairs.itertuples(index=False):
            # Conversions are linear, so a factor per pair is enough
            factor = ensure_ugm3(1.0, measurand, unit, warn=warn)
            if factor != 1.0:
                mask = (df[measurand_column] == measurand) & (df[unit_column] == unit)
                values = values.where(~mask, values * factor)
        return df.assign(**{value_column: values, unit_column: UGM3})

    return transform


def pivot_measurands(
    index: list[str] | None = None,
    measurand_column: str = "measurand",
    value_column: str = "value",
) -> Transformer:
    """
    Return a function that pivots long-format data into one row per reading.

    Duplicate measurements for the same reading are averaged. Pollutants
    with no data become NaN columns, which assess_dataframe() reports as an
    invalid reading rather than treating as zero.

    Args:
        index: Columns identifying a reading. Defaults to whichever of
               site_code and date_time are present.
        measurand_column: Column holding standardised measurand names
        value_column: Column holding the values

    Returns:
        Transformer: Function producing a wide frame with READING_COLUMNS
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        keys = index
        if keys is None:
            keys = [col for col in ("site_code", "date_time") if col in df.columns]
        if not keys:
            raise ValueError("Cannot pivot measurands without index columns")

        wide = df.pivot_table(
            index=keys,
            columns=measurand_column,
            values=value_column,
            aggfunc="mean",
        )
        wide = wide.reindex(columns=READING_COLUMNS)
        wide.columns.name = None
        return wide

    return transform
