import uuid
from sqlalchemy import Column, String, Text, Enum as SQLEnum

from app.constants.constants import SubmissionStatus
from app.models.base import Base, TimestampMixin


class Submission(Base, TimestampMixin):
    """Model for portfolio contact form submissions."""

    __tablename__ = "contact_submissions"

    submission_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(
        SQLEnum(SubmissionStatus, name="submission_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SubmissionStatus.new
    )

    def to_dict(self) -> dict:
        """Serialize to the JSON shape the admin dashboard consumes."""
        return {
            "_id": self.submission_id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "status": self.status.value if self.status else None,
            "createdAt": self.created_at.isoformat() + "Z" if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() + "Z" if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Submission {self.submission_id} {self.email} ({self.status})>"
