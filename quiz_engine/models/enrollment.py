import enum

from sqlalchemy import Column, ForeignKey, DateTime, Enum, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel, utcnow


class EnrollmentStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"


class Enrollment(BaseModel):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )

    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(
            EnrollmentStatus,
            name="enrollment_status",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=EnrollmentStatus.ACTIVE,
        nullable=False
    )
    enrolled_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    student = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
