"""SQLAlchemy models for slipcheck database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Donation(Base):
    """Accepted donation model. Rows are append-only."""

    __tablename__ = "donations"

    id = Column(Integer, primary_key=True)
    trans_ref = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    sender_name = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    message = Column(String, nullable=True)
    user_id = Column(String, nullable=True)
    receiver_account = Column(String, nullable=True)
    transacted_at = Column(DateTime, nullable=True)
    raw_payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # The idempotency gate for racing submissions of the same slip
    __table_args__ = (UniqueConstraint("trans_ref", name="uq_donation_trans_ref"),)


class Setting(Base):
    """Key-value setting model."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=True)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_by = Column(String, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
