import uuid

from sqlalchemy import Column, Integer, Text, String, TIMESTAMP, Boolean, Numeric, JSON, ForeignKey, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Candidate(Base):
    """
    Job seeker account as far as matching is concerned.
    """
    __tablename__ = 'candidate'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(Text, nullable=False, unique=True)
    display_name = Column(Text)
    headline = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    profile = relationship(
        "CandidateProfile", back_populates="candidate", uselist=False, cascade="all, delete-orphan"
    )
    applications = relationship("JobApplication", back_populates="candidate", cascade="all, delete-orphan")


class CandidateProfile(Base):
    """
    Matching-relevant profile data. A candidate without a row here has not
    completed their profile yet.
    """
    __tablename__ = 'candidate_profile'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    candidate_id = Column(String(36), ForeignKey('candidate.id', ondelete='CASCADE'), nullable=False, unique=True)

    skills = Column(JSON, nullable=False, default=list)
    experience_years = Column(Integer)
    expected_salary = Column(Numeric)
    location_text = Column(Text)
    open_to_remote = Column(Boolean, nullable=False, default=False)
    education = Column(JSON, nullable=False, default=list)  # e.g. ["BSc Computer Science, MIT"]
    summary = Column(Text)
    matching_enabled = Column(Boolean, nullable=False, default=True)

    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    candidate = relationship("Candidate", back_populates="profile")

    __table_args__ = (
        Index('idx_candidate_profile_matching', 'matching_enabled'),
    )
