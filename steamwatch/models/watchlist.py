"""Watchlist subscription model."""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from steamwatch.database import Base
from steamwatch.timeutils import utcnow


class WatchlistEntry(Base):
    """An email address watching one game for price drops."""

    __tablename__ = "watchlist_entries"
    __table_args__ = (
        UniqueConstraint("email", "game_id", name="uq_watchlist_email_game"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), nullable=False, index=True)
    game_id = Column(Uuid, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)

    # Optional thresholds
    min_discount_percent = Column(Integer)
    target_price = Column(Integer)  # Minor currency units

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    last_notified_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    game = relationship("Game", back_populates="watchlist_entries")
