"""Standing model.

One team's win/loss record within its conference for a division.
Replaced wholesale on every initialization run.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courtside.stores.postgres import Base


class Standing(Base):
    """Team record in the standings table."""

    __tablename__ = "standings"

    id: Mapped[int] = mapped_column(primary_key=True)
    conference_id: Mapped[int] = mapped_column(ForeignKey("conferences.id"), index=True)

    school: Mapped[str] = mapped_column(String(200), index=True)

    # Overall record
    overall_wins: Mapped[int] = mapped_column(default=0)
    overall_losses: Mapped[int] = mapped_column(default=0)
    overall_pct: Mapped[float] = mapped_column(default=0.0, index=True)

    # Conference record
    conference_wins: Mapped[int] = mapped_column(default=0)
    conference_losses: Mapped[int] = mapped_column(default=0)
    conference_pct: Mapped[float] = mapped_column(default=0.0)

    streak: Mapped[str | None] = mapped_column(String(20))  # e.g. "W 5"

    conference: Mapped["Conference"] = relationship(back_populates="standings")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Standing {self.school} {self.overall_wins}-{self.overall_losses}>"
