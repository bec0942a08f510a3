"""SQLAlchemy ORM models.

Models represent database tables (same schema in every division's store):
- conferences: Conferences seen in the upstream standings feed
- standings: One row per team with overall and conference records
"""

from courtside.models.conference import Conference
from courtside.models.standing import Standing

__all__ = ["Conference", "Standing"]
