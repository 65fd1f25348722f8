from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.sql import func

from sitetracker.core.database import Base


class Document(Base):
    """One stored item of a named collection, addressed by partition and sort key."""

    __tablename__ = "documents"

    collection = Column(String(100), primary_key=True)
    partition_key = Column(String(255), primary_key=True)
    sort_key = Column(String(255), primary_key=True)
    attributes = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
