"""ORM model registry — importing this module registers every table on Base.metadata.

Alembic ``env.py`` imports ``Base`` from here (not from ``base.py``) so that
autogenerate sees all tables.  Application code can also do::

    from kissan.models import Plot, Profile, User
"""

# ── Auth models ─────────────────────────────────────────────────────────────
from kissan.auth.models import User

# ── Base & Mixins ───────────────────────────────────────────────────────────
from kissan.models.base import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)

# ── Enums ───────────────────────────────────────────────────────────────────
from kissan.models.enums import PlotStatusEnum

# ── Farm records ────────────────────────────────────────────────────────────
from kissan.models.farm import Plot, Profile

__all__ = [
    # Base & mixins
    "Base",
    "CreatedAtMixin",
    # Farm records
    "Plot",
    # Enums
    "PlotStatusEnum",
    "Profile",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Auth
    "User",
]
