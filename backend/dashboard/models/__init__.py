"""ORM Models — SQLAlchemy declarative models for the dashboard tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Table and column names match the SQL the action handlers issue

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from dashboard.models.customer import Customer  # noqa: F401
from dashboard.models.invoice import Invoice  # noqa: F401
from dashboard.models.user import User  # noqa: F401
