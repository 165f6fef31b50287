from flask import request, jsonify, g
from app.services import access
from app.services.access import display_status
from app.services.policy import require_session
from app.models import ROLE_ADMIN, STATUS_PENDING
from . import bp


def _iso(dt):
    return dt.isoformat() if dt else None

def _response_dict(resp):
    if resp is None:
        return None
    return {
        "id": resp.id,
        "feedback_id": resp.feedback_id,
        "admin_id": resp.admin_id,
        "response_text": resp.response_text,
        "status": resp.status,
        "created_at": _iso(resp.created_at),
    }

def _feedback_dict(fb, include_trainee=False):
    data = {
        "id": fb.id,
        "trainee_id": fb.trainee_id,
        "title": fb.title,
        "description": fb.description,
        "created_at": _iso(fb.created_at),
        "status": display_status(fb.response),
        "response": _response_dict(fb.response),
    }
    if include_trainee:
        owner = fb.trainee
        data["trainee"] = {"full_name": owner.full_name, "email": owner.email} if owner else None
    return data

def _payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    # JSON arrays/scalars carry no fields
    return data if isinstance(data, dict) else {}


@bp.get("/feedback")
@require_session
def list_feedback():
    rows = access.list_feedback(g.actor)
    include_trainee = g.actor.role == ROLE_ADMIN
    return jsonify(ok=True, rows=[_feedback_dict(fb, include_trainee) for fb in rows])

@bp.post("/feedback")
@require_session
def submit_feedback():
    data = _payload()
    fb = access.submit_feedback(g.actor, data.get("title"), data.get("description"))
    return jsonify(ok=True, feedback=_feedback_dict(fb)), 201

@bp.post("/feedback/<int:feedback_id>/response")
@require_session
def submit_response(feedback_id: int):
    data = _payload()
    resp = access.submit_response(g.actor, feedback_id, data.get("response_text"))
    return jsonify(ok=True, response=_response_dict(resp), status=display_status(resp)), 201

@bp.delete("/responses/<int:response_id>")
@require_session
def delete_response(response_id: int):
    resp = access.delete_response(g.actor, response_id)
    # No response row left: the feedback reads as pending again
    return jsonify(ok=True, id=response_id, feedback_id=resp.feedback_id, status=STATUS_PENDING)

@bp.post("/responses/<int:response_id>/acknowledge")
@require_session
def acknowledge_response(response_id: int):
    resp = access.acknowledge_response(g.actor, response_id)
    return jsonify(ok=True, response=_response_dict(resp), status=display_status(resp))
