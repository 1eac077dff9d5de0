from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from classhub.db.base_class import Base


class Attachment(Base):
    """A stored file embedded by value in an assignment or a submission."""

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, index=True)

    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=True, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id", ondelete="CASCADE"), nullable=True, index=True)

    filename = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=False)
    content_type = Column(String(255), nullable=True)
    size = Column(Integer, nullable=True)
    storage_key = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(assignment_id IS NULL) <> (submission_id IS NULL)",
            name="ck_attachment_single_owner",
        ),
    )

    assignment = relationship("Assignment", back_populates="attachments")
    submission = relationship("Submission", back_populates="attachments")
