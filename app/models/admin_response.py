from sqlalchemy import CheckConstraint, UniqueConstraint
from app.extensions import db
from app.models.feedback import _utcnow

# Stored lifecycle values. "pending" is derived (no row) and never stored.
STATUS_PENDING = "pending"
STATUS_REPLIED = "replied"
STATUS_ACKNOWLEDGED = "acknowledged"
STORED_STATUSES = (STATUS_REPLIED, STATUS_ACKNOWLEDGED)

class AdminResponse(db.Model):
    __tablename__ = "admin_responses"

    id = db.Column(db.Integer, primary_key=True)
    feedback_id = db.Column(
        db.Integer,
        db.ForeignKey("feedback.id", ondelete="CASCADE"),
        nullable=False,
    )
    admin_id = db.Column(
        db.Integer,
        db.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    response_text = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_REPLIED, server_default=STATUS_REPLIED)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, server_default=db.func.now())

    feedback = db.relationship("Feedback", back_populates="response")
    admin = db.relationship("Profile", foreign_keys=[admin_id])

    __table_args__ = (
        UniqueConstraint("feedback_id", name="uq_admin_responses_feedback"),
        CheckConstraint(
            "status IN ('replied','acknowledged')",
            name="ck_admin_responses_status_valid",
        ),
    )
