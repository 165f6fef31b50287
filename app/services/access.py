"""
Role-based access contract for feedback and admin responses.

Every operation takes the acting ``Actor`` (subject id + role) and either
returns the affected row or raises an ``AccessError`` subclass. Mutations
commit once at the end; any failure rolls the session back, so an operation
is never partially applied.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import joinedload

from app.extensions import db
from app.models import (
    AdminResponse,
    Feedback,
    ROLE_ADMIN,
    ROLE_CHOICES,
    ROLE_TRAINEE,
    STATUS_ACKNOWLEDGED,
    STATUS_PENDING,
    STATUS_REPLIED,
)
from app.utils.validators import clean_text
from .errors import (
    AccessError,
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    StoreError,
    ValidationError,
)

TITLE_MAX_LEN = 255
DUPLICATE_RESPONSE = "Feedback already has a response"


@dataclass(frozen=True)
class Actor:
    subject_id: int
    role: str


def display_status(response: Optional[AdminResponse]) -> str:
    """No response row means pending; otherwise the stored status."""
    if response is None:
        return STATUS_PENDING
    return response.status


# ──────────────────────────────────────────────────────────────────────────────
# Guards
# ──────────────────────────────────────────────────────────────────────────────
def _check_role_known(actor: Actor) -> None:
    if actor.role not in ROLE_CHOICES:
        _log_denied(actor, "unknown_role")
        raise AuthorizationError(f"Unknown role: {actor.role!r}")


def _require_role(actor: Actor, role: str) -> None:
    _check_role_known(actor)
    if actor.role != role:
        _log_denied(actor, f"requires_{role}")
        raise AuthorizationError(f"Only a {role} may do this")


def _require_text(value, field: str, max_len: Optional[int] = None) -> str:
    text = clean_text(value)
    if not text:
        raise ValidationError(f"{field} is required")
    if max_len is not None and len(text) > max_len:
        raise ValidationError(f"{field} must be at most {max_len} characters")
    return text


def _log_denied(actor: Actor, reason: str) -> None:
    current_app.logger.warning(
        "access_denied",
        extra={"event": "access_denied", "subject_id": actor.subject_id, "role": actor.role, "reason": reason},
    )


@contextmanager
def unit_of_work(conflict: Optional[str] = None):
    """Commit on success; roll back and translate store failures otherwise."""
    try:
        yield
        db.session.commit()
    except AccessError:
        db.session.rollback()
        raise
    except IntegrityError as exc:
        db.session.rollback()
        if conflict:
            raise InvalidStateError(conflict) from exc
        raise StoreError("Data store rejected the write") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("store_error", extra={"event": "store_error"})
        raise StoreError("Data store unavailable") from exc
    except Exception:
        db.session.rollback()
        raise


# ──────────────────────────────────────────────────────────────────────────────
# Operations
# ──────────────────────────────────────────────────────────────────────────────
def submit_feedback(actor: Actor, title, description) -> Feedback:
    _require_role(actor, ROLE_TRAINEE)
    title = _require_text(title, "Title", max_len=TITLE_MAX_LEN)
    description = _require_text(description, "Description")

    fb = Feedback(trainee_id=actor.subject_id, title=title, description=description)
    with unit_of_work():
        db.session.add(fb)

    current_app.logger.info(
        "feedback_submitted",
        extra={"event": "feedback_submitted", "feedback_id": fb.id, "trainee_id": actor.subject_id},
    )
    return fb


def list_feedback(actor: Actor) -> List[Feedback]:
    """
    Trainees see only their own feedback; admins see everything plus the
    owner's profile. Newest first.
    """
    _check_role_known(actor)
    query = db.session.query(Feedback).options(joinedload(Feedback.response))
    if actor.role == ROLE_TRAINEE:
        query = query.filter(Feedback.trainee_id == actor.subject_id)
    else:
        query = query.options(joinedload(Feedback.trainee))

    try:
        return query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Data store unavailable") from exc


def submit_response(actor: Actor, feedback_id: int, text) -> AdminResponse:
    _require_role(actor, ROLE_ADMIN)
    text = _require_text(text, "Response text")

    with unit_of_work(conflict=DUPLICATE_RESPONSE):
        fb = db.session.get(Feedback, feedback_id)
        if fb is None:
            raise NotFoundError(f"Feedback {feedback_id} not found")
        if fb.response is not None:
            raise InvalidStateError(DUPLICATE_RESPONSE)
        resp = AdminResponse(feedback=fb, admin_id=actor.subject_id, response_text=text, status=STATUS_REPLIED)
        db.session.add(resp)

    current_app.logger.info(
        "response_submitted",
        extra={"event": "response_submitted", "response_id": resp.id, "feedback_id": feedback_id, "admin_id": actor.subject_id},
    )
    return resp


def delete_response(actor: Actor, response_id: int) -> AdminResponse:
    # Any admin may delete any response, not only the author.
    _require_role(actor, ROLE_ADMIN)

    with unit_of_work():
        resp = db.session.get(AdminResponse, response_id)
        if resp is None:
            raise NotFoundError(f"Response {response_id} not found")
        feedback_id = resp.feedback_id
        db.session.delete(resp)

    current_app.logger.info(
        "response_deleted",
        extra={"event": "response_deleted", "response_id": response_id, "feedback_id": feedback_id, "admin_id": actor.subject_id},
    )
    return resp


def acknowledge_response(actor: Actor, response_id: int) -> AdminResponse:
    _require_role(actor, ROLE_TRAINEE)

    with unit_of_work():
        resp = db.session.get(AdminResponse, response_id)
        if resp is None:
            raise NotFoundError(f"Response {response_id} not found")
        if resp.feedback.trainee_id != actor.subject_id:
            _log_denied(actor, "not_owner")
            raise AuthorizationError("Only the feedback's author may acknowledge this response")
        if resp.status != STATUS_REPLIED:
            raise InvalidStateError(f"Response is {resp.status}, expected {STATUS_REPLIED}")
        resp.status = STATUS_ACKNOWLEDGED

    current_app.logger.info(
        "response_acknowledged",
        extra={"event": "response_acknowledged", "response_id": response_id, "trainee_id": actor.subject_id},
    )
    return resp
