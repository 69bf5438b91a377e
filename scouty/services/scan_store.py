"""
Scan history persistence, SQLAlchemy-backed.

Uses DATABASE_URL (any SQLAlchemy URL); defaults to a local SQLite file.
Each successful wallet scan is appended as one row of ``wallet_scans``.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from scouty.logging_config import get_logger, log_with_context
from scouty.utils.errors import PersistenceError

logger = get_logger(__name__)

Base = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WalletScan(Base):
    """One recorded wallet scan."""

    __tablename__ = "wallet_scans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(64), nullable=False, index=True)
    risk_score = Column(Integer, nullable=False)
    risk_level = Column(String(16), nullable=False)
    transaction_count = Column(Integer, nullable=False)
    wallet_age_days = Column(Integer, nullable=False)
    token_diversity = Column(Integer, nullable=False)
    total_value_usd = Column(Float, nullable=False)
    ai_summary = Column(Text, nullable=False)
    ai_findings = Column(JSON, nullable=False, default=list)
    # "metadata" is reserved on declarative classes
    scan_metadata = Column("metadata", JSON, nullable=False, default=dict)
    is_public = Column(Boolean, nullable=False, default=False, index=True)
    scan_ip = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    def to_dict(self) -> Dict[str, Any]:
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            # SQLite drops tzinfo; values are always written in UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "wallet_address": self.wallet_address,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level,
            "transaction_count": self.transaction_count,
            "wallet_age_days": self.wallet_age_days,
            "token_diversity": self.token_diversity,
            "total_value_usd": self.total_value_usd,
            "ai_summary": self.ai_summary,
            "ai_findings": list(self.ai_findings or []),
            "metadata": dict(self.scan_metadata or {}),
            "is_public": self.is_public,
            "created_at": created_at.isoformat() if created_at else None,
        }


class ScanStore:
    """Reads and writes wallet scan records."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "ScanStore":
        """Build a store for a database URL.

        In-memory SQLite shares a single connection across threads so that
        background tasks and request handlers see the same database.
        """
        kwargs: Dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        return cls(create_engine(url, **kwargs))

    def create_tables(self) -> None:
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to create scan tables", details={"error": str(e)}) from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    def save_scan(
        self,
        wallet_address: str,
        risk_score: int,
        risk_level: str,
        transaction_count: int,
        wallet_age_days: int,
        token_diversity: int,
        total_value_usd: float,
        ai_summary: str,
        ai_findings: List[str],
        metadata: Dict[str, Any],
        is_public: bool = False,
        scan_ip: Optional[str] = None
    ) -> WalletScan:
        """Append a scan record.

        Raises:
            PersistenceError: If the record cannot be written
        """
        record = WalletScan(
            wallet_address=wallet_address,
            risk_score=risk_score,
            risk_level=risk_level,
            transaction_count=transaction_count,
            wallet_age_days=wallet_age_days,
            token_diversity=token_diversity,
            total_value_usd=total_value_usd,
            ai_summary=ai_summary,
            ai_findings=list(ai_findings),
            scan_metadata=dict(metadata),
            is_public=is_public,
            scan_ip=scan_ip,
            created_at=utc_now(),
        )
        try:
            with self._session() as session:
                session.add(record)
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to save wallet scan",
                details={"wallet_address": wallet_address, "error": str(e)}
            ) from e

        log_with_context(logger, "debug", "Saved wallet scan",
                         wallet_address=wallet_address, scan_id=record.id, is_public=is_public)
        return record

    def list_public_scans(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Most recent public scans, newest first."""
        try:
            with self._session() as session:
                rows = (
                    session.query(WalletScan)
                    .filter(WalletScan.is_public.is_(True))
                    .order_by(WalletScan.created_at.desc(), WalletScan.id.desc())
                    .limit(limit)
                    .all()
                )
                return [row.to_dict() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load public scans", details={"error": str(e)}) from e

    def list_wallet_scans(self, wallet_address: str) -> List[Dict[str, Any]]:
        """Every scan of one wallet, newest first."""
        try:
            with self._session() as session:
                rows = (
                    session.query(WalletScan)
                    .filter(WalletScan.wallet_address == wallet_address)
                    .order_by(WalletScan.created_at.desc(), WalletScan.id.desc())
                    .all()
                )
                return [row.to_dict() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to load wallet scans",
                details={"wallet_address": wallet_address, "error": str(e)}
            ) from e

    def dispose(self) -> None:
        self.engine.dispose()
