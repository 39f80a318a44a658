"""SQLAlchemy models for packflow database."""

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Payment(Base):
    """Payment request model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    project_name = Column(String, nullable=True)
    client_name = Column(String, nullable=False)
    client_email = Column(String, nullable=True)
    client_phone = Column(String, nullable=True)
    work_period_start = Column(Date, nullable=True)
    work_period_end = Column(Date, nullable=True)
    hours_worked = Column(Numeric(10, 2), default=0, nullable=False)
    rate = Column(Numeric(10, 2), default=0, nullable=False)
    additional_fees = Column(Numeric(10, 2), default=0, nullable=False)
    subtotal = Column(Numeric(12, 2), default=0, nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    status = Column(String, default="pending", nullable=False)
    # Timestamps are naive local time
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    accepted_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)


class BankDetails(Base):
    """Bank details model, one row per user."""

    __tablename__ = "user_bank_details"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, unique=True, nullable=False)
    account_name = Column(String, nullable=False)
    account_number = Column(String, nullable=False)
    sort_code = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
