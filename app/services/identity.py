from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

from flask import current_app, session
from flask_login import current_user, login_user, logout_user
from sqlalchemy import func

from app.extensions import db
from app.models import Profile, ROLE_CHOICES, User
from app.utils.validators import clean_str, is_valid_email, normalize_email
from .access import Actor, unit_of_work
from .errors import AuthorizationError, ValidationError


@dataclass(frozen=True)
class SessionInfo:
    subject_id: int
    email: str
    full_name: str
    role: str

    def to_dict(self) -> dict:
        return asdict(self)


def _find_user(email: str) -> Optional[User]:
    return db.session.execute(
        db.select(User).where(func.lower(User.email) == func.lower(email))
    ).scalar_one_or_none()


def sign_up(email, password, full_name, role) -> User:
    """Create the identity record and its profile in one transaction."""
    email = normalize_email(email)
    full_name = clean_str(full_name)
    min_len = current_app.config.get("PASSWORD_MIN_LENGTH", 6)

    errors = []
    if not email or not is_valid_email(email):
        errors.append("A valid email is required.")
    if not isinstance(password, str) or len(password) < min_len:
        errors.append(f"Password must be at least {min_len} characters.")
    if not full_name:
        errors.append("Full name is required.")
    if role not in ROLE_CHOICES:
        errors.append("Role must be one of: " + ", ".join(ROLE_CHOICES) + ".")
    if not errors and _find_user(email) is not None:
        errors.append("An account with that email already exists. Try signing in.")
    if errors:
        raise ValidationError(" ".join(errors))

    user = User(email=email, is_active=True)
    user.set_password(password)
    with unit_of_work(conflict="An account with that email already exists."):
        db.session.add(user)
        db.session.flush()  # get user.id
        db.session.add(Profile(id=user.id, full_name=full_name, email=email, role=role))

    current_app.logger.info(
        "account_created",
        extra={"event": "account_created", "user_id": user.id, "role": role},
    )
    return user


def authenticate(email, password) -> User:
    email = normalize_email(email)
    if not email or not isinstance(password, str) or not password:
        raise ValidationError("Email and password are required")

    user = _find_user(email)
    if not user or not user.is_active or not user.check_password(password):
        current_app.logger.warning("login_failed", extra={"event": "login_failed"})
        raise AuthorizationError("Invalid credentials")
    return user


def sign_in(user: User) -> SessionInfo:
    login_user(user)
    info = session_for(user)
    current_app.logger.info("login", extra={"event": "login", "user_id": user.id})
    return info


def sign_out() -> None:
    if current_user.is_authenticated:
        uid = current_user.id
        logout_user()
        current_app.logger.info("logout", extra={"event": "logout", "user_id": uid})
    session.clear()


def session_for(user: User) -> SessionInfo:
    actor = actor_for(user)
    profile = user.profile
    return SessionInfo(subject_id=actor.subject_id, email=user.email, full_name=profile.full_name, role=actor.role)


def current_session() -> Optional[SessionInfo]:
    if not getattr(current_user, "is_authenticated", False):
        return None
    return session_for(current_user)


def actor_for(user) -> Actor:
    """Resolve the acting (subject, role) pair. Unknown roles are rejected, never defaulted."""
    profile = getattr(user, "profile", None)
    if profile is None:
        raise AuthorizationError("Account has no profile")
    if profile.role not in ROLE_CHOICES:
        raise AuthorizationError(f"Unknown role: {profile.role!r}")
    return Actor(subject_id=profile.id, role=profile.role)
