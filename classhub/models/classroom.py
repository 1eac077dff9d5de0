from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classhub.db.base_class import Base


class Classroom(Base):
    __tablename__ = "classrooms"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    teacher_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    teacher = relationship("User")

    enrollments = relationship(
        "Enrollment", back_populates="classroom", cascade="all, delete-orphan"
    )

    # newest first, the order every listing uses
    assignments = relationship(
        "Assignment",
        back_populates="classroom",
        cascade="all, delete-orphan",
        order_by="desc(Assignment.created_at), desc(Assignment.id)",
    )
