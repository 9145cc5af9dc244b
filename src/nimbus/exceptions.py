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

"""Exceptions raised by Nimbus."""

from typing import Any


class AirQualityError(Exception):
    """Base class for all Nimbus errors."""


class InvalidReading(AirQualityError, ValueError):
    """
    A concentration is missing, negative, NaN, infinite or not a number.

    The whole reading is rejected; no partial assessment is produced.
    """

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} concentration {value!r}: {reason}")


class UnknownPollutant(AirQualityError, LookupError):
    """
    No breakpoint table is registered for a pollutant.

    This indicates a programming error in the index definitions rather than
    bad input data.
    """

    def __init__(self, pollutant: Any):
        self.pollutant = pollutant
        super().__init__(f"No breakpoint table registered for pollutant {pollutant!r}")
