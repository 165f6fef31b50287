import pytest
from sqlalchemy.exc import IntegrityError
from app.extensions import db
from app.models import AdminResponse, Feedback, Profile, User
from app.services.access import unit_of_work
from app.services.errors import InvalidStateError, StoreError

def _feedback(trainee_id):
    fb = Feedback(trainee_id=trainee_id, title="t", description="d")
    db.session.add(fb)
    db.session.commit()
    return fb.id

def test_one_response_per_feedback_at_store_level(app, trainee, admin):
    with app.app_context():
        fb_id = _feedback(trainee.subject_id)
        db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="a"))
        db.session.commit()

        db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="b"))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_concurrent_duplicate_surfaces_as_invalid_state(app, trainee, admin):
    # Simulates the losing side of two admins racing past the "no response yet" check
    with app.app_context():
        fb_id = _feedback(trainee.subject_id)
        db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="a"))
        db.session.commit()

        with pytest.raises(InvalidStateError):
            with unit_of_work(conflict="Feedback already has a response"):
                db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="b"))
        assert AdminResponse.query.filter_by(feedback_id=fb_id).count() == 1

def test_integrity_error_without_conflict_is_store_error(app, trainee, admin):
    with app.app_context():
        fb_id = _feedback(trainee.subject_id)
        db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="a"))
        db.session.commit()

        with pytest.raises(StoreError) as info:
            with unit_of_work():
                db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="b"))
        assert isinstance(info.value.__cause__, IntegrityError)

def test_pending_cannot_be_stored(app, trainee, admin):
    with app.app_context():
        fb_id = _feedback(trainee.subject_id)
        db.session.add(AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="a", status="pending"))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_response_defaults_to_replied(app, trainee, admin):
    with app.app_context():
        fb_id = _feedback(trainee.subject_id)
        resp = AdminResponse(feedback_id=fb_id, admin_id=admin.subject_id, response_text="a")
        db.session.add(resp)
        db.session.commit()
        assert resp.status == "replied"

def test_profile_role_is_constrained(app):
    with app.app_context():
        u = User(email="odd@example.com")
        u.set_password("secret123")
        db.session.add(u)
        db.session.flush()
        db.session.add(Profile(id=u.id, full_name="Odd", email=u.email, role="owner"))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_email_unique_case_insensitive(app):
    with app.app_context():
        a = User(email="dup@example.com"); a.set_password("x")
        db.session.add(a); db.session.commit()
        b = User(email="DUP@example.com"); b.set_password("x")
        db.session.add(b)
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

def test_unexpected_error_rolls_back_pending_rows(app, trainee):
    with app.app_context():
        with pytest.raises(ZeroDivisionError):
            with unit_of_work():
                db.session.add(Feedback(trainee_id=trainee.subject_id, title="t", description="d"))
                1 / 0
        assert len(db.session.new) == 0
        assert Feedback.query.count() == 0
