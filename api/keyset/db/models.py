"""SQLAlchemy models for the records schema."""

from sqlalchemy import BigInteger, Column, DateTime, Identity, Index, Text, create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from ..config import get_settings

# Create base class for models
Base = declarative_base()


class Record(Base):
    """Records table model."""
    __tablename__ = 'records'

    id = Column(BigInteger, Identity(always=False), primary_key=True)
    name = Column(Text, nullable=False)
    category = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('records_created_at_id', 'created_at', 'id'),
        Index('records_category_id', 'category', 'id'),
    )


def create_engine_from_settings():
    """Create SQLAlchemy engine from application settings."""
    return create_engine(get_settings().database_url)
