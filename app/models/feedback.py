from datetime import datetime, timezone
from app.extensions import db

def _utcnow():
    return datetime.now(timezone.utc)

class Feedback(db.Model):
    __tablename__ = "feedback"

    id = db.Column(db.Integer, primary_key=True)
    trainee_id = db.Column(
        db.Integer,
        db.ForeignKey("profiles.id", name="feedback_trainee_id_fkey", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, server_default=db.func.now())

    trainee = db.relationship("Profile", foreign_keys=[trainee_id])
    # Zero or one response; UNIQUE(feedback_id) on admin_responses backs this up
    response = db.relationship(
        "AdminResponse",
        uselist=False,
        back_populates="feedback",
        passive_deletes=True,
    )

    __table_args__ = (
        db.Index("ix_feedback_trainee_created_at", "trainee_id", "created_at"),
    )
