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
Example usage of Nimbus.

This script demonstrates how to:
1. Assess a single reading
2. Handle an invalid reading
3. Assess a DataFrame of readings
4. Convert long-format measurements and assess them
"""

from datetime import datetime

import pandas as pd

from nimbus import (
    InvalidReading,
    PollutantReading,
    assess_air_quality,
    assess_dataframe,
    describe_air_quality,
    readings_from_long,
)
from nimbus.metrics.indices import us_epa


def example_1_single_reading():
    """Example 1: Assess one reading."""
    print("=" * 60)
    print("Example 1: Single Reading")
    print("=" * 60)

    reading = PollutantReading(
        co=230.3, no2=13.5, o3=62.9, so2=2.1, pm2_5=200.0, pm10=210.0
    )
    assessment = assess_air_quality(reading)

    print(f"AQI: {assessment.aqi} ({assessment.category.label})")
    print(f"Colour: {us_epa.get_color(assessment.category)}")
    print(us_epa.get_health_message(assessment.category))
    for kind, value in assessment.sub_indices.items():
        print(f"  {kind.label:6s} {value:4d}")

    summary = describe_air_quality(reading)
    print(f"Main contributors: {summary['main_contributors']}")
    print()


def example_2_invalid_reading():
    """Example 2: Invalid readings are rejected."""
    print("=" * 60)
    print("Example 2: Invalid Reading")
    print("=" * 60)

    try:
        PollutantReading(co=-1, no2=0, o3=0, so2=0, pm2_5=0, pm10=0)
    except InvalidReading as e:
        print(f"Rejected: {e}")
    print()


def example_3_dataframe():
    """Example 3: Assess many readings at once."""
    print("=" * 60)
    print("Example 3: DataFrame of Readings")
    print("=" * 60)

    df = pd.DataFrame(
        {
            "CO": [0.0, 230.3, 20000.0],
            "NO2": [0.0, 13.5, 40.0],
            "O3": [0.0, 62.9, 30.0],
            "SO2": [0.0, 2.1, 5.0],
            "PM2.5": [0.0, 200.0, 12.0],
            "PM10": [0.0, 210.0, 300.0],
        },
        index=["clean", "smoke", "traffic"],
    )
    print(assess_dataframe(df)[["aqi", "category", "dominant_pollutants"]])
    print()


def example_4_long_format():
    """Example 4: Pivot long-format measurements, then assess."""
    print("=" * 60)
    print("Example 4: Long-Format Measurements")
    print("=" * 60)

    ts = datetime(2024, 6, 1, 12, 0)
    long_df = pd.DataFrame(
        {
            "site_code": ["MY1"] * 6,
            "date_time": [ts] * 6,
            "measurand": ["CO", "NO2", "O3", "SO2", "PM2.5", "PM10"],
            "value": [0.4, 60.0, 35.0, 3.0, 18.0, 30.0],
            "units": ["mg/m3", "ppb", "ppb", "ug/m3", "ug/m3", "ug/m3"],
        }
    )

    wide = readings_from_long(long_df)
    print(assess_dataframe(wide))
    print()


if __name__ == "__main__":
    example_1_single_reading()
    example_2_invalid_reading()
    example_3_dataframe()
    example_4_long_format()
