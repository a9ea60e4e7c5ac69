"""
Capsule persistence for SQL databases and an in-memory test implementation.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import JSON, Column, Float, String, Text, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker


@dataclass
class CapsuleRecord:
    user_id: str
    title: Any = None
    content: Any = None
    media: Any = None
    release_date: Any = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user_id,
            "title": self.title,
            "content": self.content,
            "media": self.media,
            "releaseDate": self.release_date,
            "createdAt": datetime.fromtimestamp(
                self.created_at, tz=timezone.utc
            ).isoformat(),
        }


class CapsuleStore(Protocol):
    """Interface for capsule persistence."""

    def create(self, record: CapsuleRecord) -> CapsuleRecord:
        ...

    def find_by_owner(self, user_id: str) -> list[CapsuleRecord]:
        ...


class InMemoryCapsuleStore:
    """Simple in-memory capsule store for development and tests."""

    def __init__(self):
        self.capsules: Dict[str, CapsuleRecord] = {}

    def create(self, record: CapsuleRecord) -> CapsuleRecord:
        self.capsules[record.id] = record
        return record

    def find_by_owner(self, user_id: str) -> list[CapsuleRecord]:
        owned = [c for c in self.capsules.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.created_at)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.capsules.clear()


class SqlCapsuleStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlCapsuleStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_record(self, row: "CapsuleRow") -> CapsuleRecord:
        return CapsuleRecord(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            content=row.content,
            media=row.media,
            release_date=row.release_date,
            created_at=row.created_at,
        )

    def create(self, record: CapsuleRecord) -> CapsuleRecord:
        with self.Session() as session:
            row = CapsuleRow(
                id=record.id,
                user_id=record.user_id,
                title=record.title,
                content=record.content,
                media=record.media,
                release_date=record.release_date,
                created_at=record.created_at,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_record(row)

    def find_by_owner(self, user_id: str) -> list[CapsuleRecord]:
        with self.Session() as session:
            stmt = (
                select(CapsuleRow)
                .where(CapsuleRow.user_id == user_id)
                .order_by(CapsuleRow.created_at.asc())
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_record(row) for row in rows]


Base = declarative_base()


class CapsuleRow(Base):
    __tablename__ = "capsules"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    media = Column(JSON, nullable=True)
    # Stored verbatim as sent by the client.
    release_date = Column(JSON, nullable=True)
    created_at = Column(Float, nullable=False)
