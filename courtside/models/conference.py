"""Conference model.

A conference row is created during initialization and never updated.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courtside.stores.postgres import Base


class Conference(Base):
    """Athletic conference within a division."""

    __tablename__ = "conferences"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), index=True)

    standings: Mapped[list["Standing"]] = relationship(back_populates="conference")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Conference {self.name}>"
