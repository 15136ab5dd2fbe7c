"""SQLAlchemy ORM models"""

from sqlalchemy import Column, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AccountRecord(Base):
    """Whole account state stored as one JSON document"""

    __tablename__ = "account_state"

    key = Column(Text, primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
