"""
Owner models.

Models:
- User: Guide account, identified by an API token
- Tour: Route-owning entity; a track file is attached to one tour
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid

from hikeroute.models.base import Base


class User(Base):
    """
    Guide account.

    Only what the track engine needs: a stable id and the bearer
    token that identifies the caller.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    api_token = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    tours = relationship("Tour", back_populates="guide")

    def __repr__(self):
        return f"<User {self.id} ({self.name})>"


class Tour(Base):
    """A guided tour owned by one guide."""

    __tablename__ = "tours"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    guide_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    guide = relationship("User", back_populates="tours")

    def __repr__(self):
        return f"<Tour {self.id} guide={self.guide_id}>"
