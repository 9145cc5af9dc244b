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

"""Air Quality Index assessment"""

from . import metrics
from .exceptions import AirQualityError, InvalidReading, UnknownPollutant
from .metrics import (
    assess_air_quality,
    assess_dataframe,
    describe_air_quality,
    readings_from_long,
    sub_indices,
)
from .types import (
    AirQualityAssessment,
    Category,
    DominantPollutant,
    PollutantKind,
    PollutantReading,
)

__version__ = "0.1.0"
