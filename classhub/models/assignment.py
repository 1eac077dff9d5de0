from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from classhub.core.config import DEFAULT_POINTS
from classhub.db.base_class import Base


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    classroom_id = Column(Integer, ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True, index=True)
    # informational only, grades are never checked against it
    points = Column(Float, nullable=False, default=DEFAULT_POINTS)

    is_published = Column(Boolean, nullable=False, default=True)
    collect_submissions = Column(Boolean, nullable=False, default=True)

    # day (UTC) the reminder sweep last mailed this assignment
    reminder_sent_on = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    classroom = relationship("Classroom", back_populates="assignments")
    teacher = relationship("User")

    attachments = relationship(
        "Attachment",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="Attachment.id",
    )
    submissions = relationship(
        "Submission",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="Submission.submitted_at",
    )
    comments = relationship(
        "Comment",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )

    def submission_for(self, student_id: int):
        for sub in self.submissions:
            if sub.student_id == student_id:
                return sub
        return None

    def storage_keys(self) -> list[str]:
        """Stored files of the assignment and of every submission to it."""
        keys = [att.storage_key for att in self.attachments]
        for sub in self.submissions:
            keys.extend(att.storage_key for att in sub.attachments)
        return keys
