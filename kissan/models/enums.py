"""PostgreSQL-backed enum types for ORM models.

Each StrEnum maps 1:1 to a PostgreSQL CREATE TYPE ... AS ENUM.
Enums that only shape API payloads live next to their schemas.
"""

from enum import StrEnum


class PlotStatusEnum(StrEnum):
    """Cultivation stage of a single plot."""

    preparation = "Preparation"
    active = "Active"
    harvested = "Harvested"
