import uuid

from sqlalchemy import Column, Text, String, TIMESTAMP, ForeignKey, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class JobApplication(Base):
    __tablename__ = 'job_application'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    candidate_id = Column(String(36), ForeignKey('candidate.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(String(36), ForeignKey('job.id', ondelete='CASCADE'), nullable=False)
    status = Column(Text, nullable=False, default='PENDING')  # PENDING|REVIEWED|SHORTLISTED|REJECTED|HIRED
    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    candidate = relationship("Candidate", back_populates="applications")
    job = relationship("Job", back_populates="applications")

    __table_args__ = (
        UniqueConstraint('candidate_id', 'job_id', name='uq_application_candidate_job'),
        Index('idx_application_job', 'job_id', 'applied_at'),
    )
