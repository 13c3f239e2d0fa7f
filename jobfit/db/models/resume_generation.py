"""
Generation record: one row per resume generation that produced an AI answer.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobfit.db.base import Base


class GenerationStatus(str, enum.Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ResumeGeneration(Base):
    """
    Stored output of a resume generation.

    Written once and never mutated; pruned after the retention window.
    ``file_data`` holds the rendered DOCX as base64 text.
    """
    __tablename__ = "resume_generations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)  # NULL = anonymous
    user_email = Column(String, nullable=False, default="Anonymous")

    job_title = Column(String, nullable=False)
    company_name = Column(String, nullable=False)
    match_score = Column(Integer, nullable=False, default=0)
    original_name = Column(String, nullable=False)
    status = Column(Enum(GenerationStatus), nullable=False, default=GenerationStatus.SUCCESS, index=True)
    file_data = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="generations")

    __table_args__ = (
        Index('idx_generation_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<ResumeGeneration(id={self.id}, user_id={self.user_id}, status='{self.status}')>"
