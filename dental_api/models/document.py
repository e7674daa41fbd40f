from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from ..core.database import Base


class Document(Base):
    """A schemaless record belonging to a named collection."""
    __tablename__ = "documents"

    id = Column(String(40), primary_key=True)
    collection = Column(String(50), nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Document(collection='{self.collection}', id='{self.id}')>"
