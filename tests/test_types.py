"""
Tests for types.py - readings, pollutant kinds and assessments.
"""

import dataclasses

import numpy as np
import pytest

from nimbus.exceptions import AirQualityError, InvalidReading
from nimbus.types import (
    READING_COLUMNS,
    AirQualityAssessment,
    Category,
    DominantPollutant,
    PollutantKind,
    PollutantReading,
)


class TestPollutantKind:
    """Tests for the PollutantKind enumeration."""

    def test_reporting_order(self):
        """Test that members iterate in reporting order."""
        assert [k.label for k in PollutantKind] == [
            "CO",
            "NO2",
            "O3",
            "SO2",
            "PM2.5",
            "PM10",
        ]

    def test_fields_match_reading(self):
        """Test that every kind names a PollutantReading field."""
        fields = [f.name for f in dataclasses.fields(PollutantReading)]
        assert [k.field for k in PollutantKind] == fields == READING_COLUMNS


class TestCategory:
    """Tests for the Category enumeration."""

    def test_severity_order(self):
        """Test that severity increases through the bands."""
        assert Category.GOOD.severity == 0
        assert Category.HAZARDOUS.severity == 5
        assert Category.UNHEALTHY_FOR_SENSITIVE_GROUPS.label == (
            "Unhealthy for Sensitive Groups"
        )


class TestPollutantReading:
    """Tests for PollutantReading construction."""

    def test_values_become_floats(self):
        """Test that ints and numpy scalars are stored as floats."""
        reading = PollutantReading(
            co=1, no2=np.float64(2.5), o3=np.int64(3), so2=0, pm2_5=4, pm10=5
        )
        assert reading.co == 1.0
        assert type(reading.o3) is float
        assert reading.concentration(PollutantKind.NO2) == 2.5

    def test_frozen(self):
        """Test that readings cannot be modified."""
        reading = PollutantReading(0, 0, 0, 0, 0, 0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            reading.co = 5.0

    def test_from_mapping_with_aliases(self):
        """Test building a reading from a mapping with mixed key styles."""
        reading = PollutantReading.from_mapping(
            {
                "carbon monoxide": 230.3,
                "no2": 13.5,
                "O3": 62.9,
                "SO2": 2.1,
                "PM2.5": 20.0,
                "pm10": 21.0,
                "us-epa-index": 2,
            }
        )
        assert reading.co == 230.3
        assert reading.pm2_5 == 20.0

    def test_from_mapping_missing(self):
        """Test that a missing pollutant is reported by field name."""
        with pytest.raises(InvalidReading) as excinfo:
            PollutantReading.from_mapping({"co": 1.0})
        assert excinfo.value.field == "no2"

    def test_from_mapping_same_pollutant_twice(self):
        """Test that two keys naming one pollutant are rejected."""
        values = {"co": 0, "no2": 0, "o3": 0, "so2": 0, "pm2_5": 10.0, "pm10": 0}
        values["PM2.5"] = 200.0
        with pytest.raises(InvalidReading, match="given twice") as excinfo:
            PollutantReading.from_mapping(values)
        assert excinfo.value.field == "pm2_5"

    def test_errors_share_base_class(self):
        """Test that InvalidReading is an AirQualityError."""
        with pytest.raises(AirQualityError):
            PollutantReading(-1, 0, 0, 0, 0, 0)


class TestAssessmentToDict:
    """Tests for AirQualityAssessment.to_dict."""

    def test_plain_values(self):
        """Test that to_dict contains only plain Python values."""
        assessment = AirQualityAssessment(
            aqi=128,
            category=Category.UNHEALTHY_FOR_SENSITIVE_GROUPS,
            dominant_pollutants=(DominantPollutant(PollutantKind.PM10, 210.0, 128),),
            sub_indices={PollutantKind.PM10: 128, PollutantKind.CO: 2},
        )
        assert assessment.to_dict() == {
            "aqi": 128,
            "category": "Unhealthy for Sensitive Groups",
            "dominant_pollutants": [
                {"pollutant": "PM10", "concentration": 210.0, "sub_index": 128}
            ],
            # Reporting order, whatever order the mapping was built in
            "sub_indices": {"CO": 2, "PM10": 128},
        }
