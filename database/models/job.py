import uuid

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, Boolean, Numeric, JSON, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Job(Base):
    __tablename__ = 'job'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership
    owner_id = Column(Text, nullable=False)
    organization_id = Column(Text)

    # Core Identity
    title = Column(Text, nullable=False)
    company = Column(Text)
    location_text = Column(Text)
    is_remote = Column(Boolean, nullable=False, default=False)
    job_type = Column(Text)

    # Content
    description = Column(Text)
    requirements = Column(Text)
    responsibilities = Column(Text)
    required_skills = Column(JSON, nullable=False, default=list)

    # Structural Fields
    salary_min = Column(Numeric)
    salary_max = Column(Numeric)
    experience_min = Column(Integer)
    experience_max = Column(Integer)
    category = Column(Text)  # RESTRICTED|STANDARD, derived from the title when NULL

    # State Flags
    status = Column(Text, nullable=False, default='active')  # active|closed|draft
    is_featured = Column(Boolean, nullable=False, default=False)
    matching_enabled = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    applications = relationship("JobApplication", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_job_status_matching', 'status', 'matching_enabled'),
        Index('idx_job_owner', 'owner_id'),
    )
