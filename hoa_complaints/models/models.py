"""
Database Models
SQLAlchemy ORM rows for residents and complaints.

Column names follow the storage contract (ResidentId, CreatedAtUtc, ...).
Enums and timestamps are stored as text; the mapper in
hoa_complaints.services.mapper owns the conversion.
"""

from typing import Optional
from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hoa_complaints.core.database import Base

# 64-bit ids; SQLite keeps INTEGER so the primary key stays a rowid alias
IdType = BigInteger().with_variant(Integer, "sqlite")


class ResidentRow(Base):
    """A unit occupant. Seeded, never updated or deleted here."""
    __tablename__ = "Residents"

    resident_id: Mapped[int] = mapped_column("ResidentId", IdType, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column("Name", String(200))
    unit: Mapped[str] = mapped_column("Unit", String(50))
    email: Mapped[str] = mapped_column("Email", String(255))


class ComplaintRow(Base):
    """
    A maintenance complaint.

    sqlite_autoincrement keeps ids from being reused after the highest row
    is removed, including across restarts.
    """
    __tablename__ = "Complaints"
    __table_args__ = {"sqlite_autoincrement": True}

    complaint_id: Mapped[int] = mapped_column("ComplaintId", IdType, primary_key=True, autoincrement=True)
    resident_id: Mapped[int] = mapped_column("ResidentId", IdType, ForeignKey("Residents.ResidentId"), index=True)

    subject: Mapped[str] = mapped_column("Subject", Text)
    description: Mapped[str] = mapped_column("Description", Text)

    # NOT_STARTED / STARTED / COMPLETE
    status: Mapped[str] = mapped_column("Status", String(20), index=True)
    # LOW / NORMAL / HIGH
    priority: Mapped[str] = mapped_column("Priority", String(20), index=True)

    # Canonical ISO 8601 text, see hoa_complaints.core.utc.format_utc
    created_at_utc: Mapped[str] = mapped_column("CreatedAtUtc", String(40))
    updated_at_utc: Mapped[Optional[str]] = mapped_column("UpdatedAtUtc", String(40), nullable=True)

    location_note: Mapped[Optional[str]] = mapped_column("LocationNote", Text, nullable=True)
