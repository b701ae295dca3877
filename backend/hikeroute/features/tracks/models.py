"""
Track file models.

Models:
- TrackFile: Aggregate statistics of the latest track uploaded for a tour
- UploadRateLimit: Per-user sliding window of accepted uploads
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, Integer, ForeignKey, JSON
import uuid

from hikeroute.models.base import Base


class TrackFile(Base):
    """
    Track file uploaded for a tour.

    One row per owner; a re-upload overwrites the previous row,
    no history is kept. The raw file lives in the object store at
    storage_path.
    """

    __tablename__ = "track_files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("tours.id"), unique=True, nullable=False)

    # File info
    original_filename = Column(String(255), nullable=False)
    storage_path = Column(String(500), nullable=False)

    # Calculated metrics
    total_distance_km = Column(Float, nullable=False, default=0.0)
    total_elevation_gain_m = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)

    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<TrackFile {self.owner_id} ({self.original_filename})>"


class UploadRateLimit(Base):
    """
    Sliding-window upload counter.

    events holds ISO timestamps of uploads accepted inside the current
    window; stale entries are pruned on every hit.
    """

    __tablename__ = "upload_rate_limits"

    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    events = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UploadRateLimit {self.user_id} events={len(self.events or [])}>"
