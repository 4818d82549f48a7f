"""
Saved track model.

Stores track points with their cached statistics.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, Text, JSON
import uuid

from trailstats.db.base import Base


class SavedTrackRecord(Base):
    """
    Model for storing a saved track.

    Points are kept as a JSON list of {"lat", "lng", "elevation"?, "time"?}
    so statistics can be recomputed without the original GPX.
    """

    __tablename__ = "saved_tracks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=True)

    points = Column(JSON, nullable=False, default=list)

    # Cached statistics
    elevation_gain_m = Column(Float, nullable=True)
    elevation_loss_m = Column(Float, nullable=True)
    length_km = Column(Float, nullable=True)

    # Cached chart series: [{"distance_km", "elevation_m"}]
    elevation_profile = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SavedTrackRecord {self.id} ({self.name})>"
