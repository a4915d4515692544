from __future__ import annotations


from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text, UniqueConstraint, Index
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class CrawlJob(Base):
    __tablename__ = "crawl_jobs"

    crawl_id = Column(String(16), primary_key=True)
    root_url = Column(Text, nullable=False)
    scope_domain = Column(Text, nullable=False)
    max_distance = Column(Integer, nullable=False)
    max_seconds = Column(Integer, nullable=False)
    max_urls = Column(Integer, nullable=False)
    start_time = Column(DateTime, nullable=False)
    last_modified = Column(DateTime, nullable=False)
    num_pages = Column(Integer, nullable=False, default=0)
    max_distance_seen = Column(Integer, nullable=False, default=0)
    status = Column(String(16), nullable=False, default="Active")  # Active | Stopped
    stop_reason = Column(String(32), nullable=True)


class VisitedClaim(Base):
    __tablename__ = "visited_claims"
    __table_args__ = (UniqueConstraint("crawl_id", "url", name="uq_visited_claims_crawl_url"),)

    claim_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    crawl_id = Column(String(16), nullable=False)
    url = Column(Text, nullable=False)
    claimed_at = Column(DateTime, nullable=False)


class QueuedTask(Base):
    __tablename__ = "crawl_tasks"
    __table_args__ = (Index("ix_crawl_tasks_available_at", "available_at"),)

    task_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    crawl_id = Column(String(16), nullable=False)
    payload = Column(Text, nullable=False)  # CrawlTask.to_json()
    enqueued_at = Column(DateTime, nullable=False)
    available_at = Column(DateTime, nullable=False)
    lease_token = Column(String(64), nullable=True)
    deliveries = Column(Integer, nullable=False, default=0)
