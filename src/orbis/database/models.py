"""SQLAlchemy models for orbis database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Integer,
    ForeignKey,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    color = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)


class ImportBatch(Base):
    """Import batch model."""

    __tablename__ = "import_batches"

    id = Column(String, primary_key=True)
    file_name = Column(String, nullable=False)
    date = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    count = Column(Integer, nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="import_batch")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    category_id = Column(String, nullable=False, default="")
    description = Column(String, nullable=False, default="")
    type = Column(String, nullable=False)
    recurrence = Column(String, nullable=False, default="unique")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    import_batch_id = Column(
        String, ForeignKey("import_batches.id"), nullable=True, index=True
    )
    is_imported = Column(Boolean, default=False, nullable=False)
    original_description = Column(String, nullable=True)

    # Relationships
    import_batch = relationship("ImportBatch", back_populates="transactions")


class PatrimonyTransaction(Base):
    """Patrimony movement model."""

    __tablename__ = "patrimony"

    id = Column(String, primary_key=True)
    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
