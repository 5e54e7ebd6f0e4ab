# app/api/evaluate.py
# Magic-link endpoints for external evaluators. No login: the token in the URL is the credential.
from flask import Blueprint, jsonify, request
from app.services import magic_link

bp = Blueprint("evaluate", __name__)


def _payload():
    # the token is checked before the body, so a bad body never hints at token validity
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.get("/<token>")
def assigned(token):
    return jsonify(magic_link.list_assigned(token))


@bp.get("/<token>/applications/<int:application_id>")
def application_detail(token, application_id):
    return jsonify(magic_link.get_application_detail(token, application_id))


@bp.post("/<token>/applications/<int:application_id>/criteria/<int:criterion_id>")
def submit_criterion_score(token, application_id, criterion_id):
    score = _payload().get("score")
    return jsonify(magic_link.submit_criterion_score(token, application_id, criterion_id, score))


@bp.post("/<token>/applications/<int:application_id>/interview-score")
def submit_interview_score(token, application_id):
    payload = _payload()
    return jsonify(magic_link.submit_interview_score(token, application_id, payload.get("score"), notes=payload.get("notes")))
