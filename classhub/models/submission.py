from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from classhub.db.base_class import Base
from classhub.services.lateness import LATE, classify_submission, minutes_late


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # set once on insert, grading never touches it
    submitted_at = Column(DateTime(timezone=True), nullable=False)

    # Grading fields (nullable until graded)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    is_graded = Column(Boolean, nullable=False, default=False)

    # one submission per student per assignment; the insert path relies on it
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User", back_populates="submissions")
    attachments = relationship(
        "Attachment",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="Attachment.id",
    )

    @property
    def status(self) -> str:
        return classify_submission(self.assignment.due_date, self.submitted_at)

    @property
    def is_late(self) -> bool:
        return self.status == LATE

    @property
    def late_by_minutes(self) -> int | None:
        return minutes_late(self.assignment.due_date, self.submitted_at)
