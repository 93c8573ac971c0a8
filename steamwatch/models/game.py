"""Game and price snapshot models."""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON, Text, Uuid
from sqlalchemy.orm import relationship

from steamwatch.database import Base
from steamwatch.timeutils import utcnow


class Game(Base):
    """A Steam app known to the catalog."""

    __tablename__ = "games"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    steam_app_id = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50))
    header_image = Column(String(512))
    developers = Column(JSON)  # ["Valve"]
    publishers = Column(JSON)
    release_date = Column(String(100))  # As displayed by Steam, e.g. "21 Aug, 2012"
    genres = Column(JSON)  # [{id, description}]
    short_description = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, index=True)

    # Relationships
    price_snapshots = relationship("PriceSnapshot", back_populates="game", cascade="all, delete-orphan")
    watchlist_entries = relationship("WatchlistEntry", back_populates="game", cascade="all, delete-orphan")


class PriceSnapshot(Base):
    """Daily price observation for a game. Never updated once written."""

    __tablename__ = "price_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    game_id = Column(Uuid, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)

    # Pricing, in minor currency units
    currency = Column(String(3), nullable=False)
    initial_price = Column(Integer, nullable=False)
    final_price = Column(Integer, nullable=False)
    discount_percent = Column(Integer)
    is_on_sale = Column(Boolean, nullable=False, default=False)

    recorded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Relationships
    game = relationship("Game", back_populates="price_snapshots")
