from flask import jsonify, request
from flask_login import current_user
from . import bp
from ...services import scoring
from ...services.aggregator import score_breakdown, recompute_year
from ...utils.decorators import admin_required, staff_required
from ...utils.http import json_body, require_int


def _scores(app_row):
    return {
        "application_id": app_row.id,
        "objective_score": app_row.objective_score,
        "interview_score": app_row.interview_score,
        "external_score": app_row.external_score,
        "total_score": app_row.total_score,
    }


@bp.post("/<int:application_id>/evaluations")
@admin_required
def submit_evaluation(application_id):
    payload = json_body()
    app_row = scoring.submit_score(
        application_id,
        require_int(payload.get("criterion_id"), "criterion_id"),
        payload.get("score"),
        evaluator=current_user.email,
        notes=payload.get("notes"),
    )
    return jsonify(_scores(app_row))


@bp.post("/<int:application_id>/evaluations/batch")
@admin_required
def submit_evaluation_batch(application_id):
    payload = json_body()
    app_row = scoring.submit_batch(application_id, payload.get("entries"), evaluator=current_user.email)
    return jsonify(_scores(app_row))


@bp.post("/<int:application_id>/interview-scores")
@admin_required
def submit_interview_score(application_id):
    payload = json_body()
    app_row = scoring.submit_interview_score(
        application_id,
        require_int(payload.get("interviewer_id"), "interviewer_id"),
        payload.get("score"),
        notes=payload.get("notes"),
    )
    return jsonify(_scores(app_row))


@bp.get("/<int:application_id>/scores")
@staff_required
def get_scores(application_id):
    return jsonify(score_breakdown(application_id))


@bp.post("/recompute")
@admin_required
def recompute_scores():
    year = require_int(request.args.get("year"), "year")
    count = recompute_year(year)
    return jsonify({"year": year, "recomputed": count})
