from sqlalchemy import func, CheckConstraint
from app.extensions import db

# Plain text+CHECK for roles (no DB enum)
ROLE_ADMIN = "admin"
ROLE_TRAINEE = "trainee"
ROLE_CHOICES = (ROLE_ADMIN, ROLE_TRAINEE)

class Profile(db.Model):
    __tablename__ = "profiles"

    # Same id as the identity record; role never changes after creation
    id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    user = db.relationship("User", back_populates="profile")

    __table_args__ = (
        CheckConstraint(
            "role IN ('admin','trainee')",
            name="ck_profiles_role_valid",
        ),
    )

    def __repr__(self):
        return f"<Profile {self.id} {self.email} {self.role}>"
