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
AQI index implementations.

Each index module provides:
- INDEX_INFO: Metadata about the index
- TABLES: One BreakpointTable per pollutant
- sub_index(): Sub-index for a concentration in the table's unit
- classify(): Category for an overall index value

Index modules register themselves on import. Registration happens once,
while the package is first imported; afterwards the registry is read-only.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..base import IndexInfo

# Registry of available indices
_INDICES: dict[str, "IndexInfo"] = {}


def register_index(key: str, info: "IndexInfo") -> None:
    """Register an AQI index."""
    if key in _INDICES:
        raise ValueError(f"Index '{key}' is already registered")
    _INDICES[key] = info


def get_index(key: str) -> "IndexInfo | None":
    """Get info about a registered index."""
    return _INDICES.get(key.upper())


def list_indices() -> list[str]:
    """List all registered index keys."""
    return list(_INDICES.keys())


# Import indices to trigger registration
from . import us_epa  # noqa: E402, F401
