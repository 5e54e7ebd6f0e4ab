"""Evaluation store.

Three flavors of score rows, all written with an atomic
``INSERT ... ON CONFLICT DO UPDATE`` keyed on their natural uniqueness
constraint, so a retried submission never creates a second row:

- ``evaluations``       (application, criterion)             internal admin scores
- ``interview_scores``  (application, interviewer)           legacy holistic score
- ``criterion_scores``  (application, criterion, evaluator)  external magic-link scores

Each write recomputes the application's derived scores before the commit.
"""
import math
from datetime import datetime
from flask import current_app
from sqlalchemy.dialects import postgresql, sqlite
from ..extensions import db
from ..errors import ValidationError, NotFound
from ..models.application import Application
from ..models.criterion import Criterion
from ..models.evaluation import Evaluation
from ..models.interview_score import InterviewScore
from ..models.criterion_score import CriterionScore
from ..models.interviewer import Interviewer
from ..utils.db import transaction
from .aggregator import recompute

_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def validate_score(score, limit, field="score"):
    if score is None or score == "":
        raise ValidationError("score is required", field=field)
    if isinstance(score, bool):
        raise ValidationError("score must be a number", field=field)
    try:
        value = float(score)
    except (TypeError, ValueError):
        raise ValidationError("score must be a number", field=field)
    if math.isnan(value):
        raise ValidationError("score must be a number", field=field)
    if value < 0:
        raise ValidationError(f"score {value:g} is below the minimum of 0", field=field, bound="min", limit=0)
    if value > limit:
        raise ValidationError(f"score {value:g} exceeds the maximum of {limit:g}", field=field, bound="max", limit=limit)
    return value


def _upsert(model, key_cols, values, update_cols):
    dialect = db.session.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"upsert not supported on {dialect}")
    stmt = insert(model.__table__).values(**values)
    set_ = {c: stmt.excluded[c] for c in update_cols}
    set_["updated_at"] = db.func.now()
    stmt = stmt.on_conflict_do_update(index_elements=key_cols, set_=set_)
    db.session.execute(stmt)


def load_application(application_id):
    app_row = db.session.get(Application, application_id)
    if app_row is None:
        raise NotFound(f"application {application_id} not found")
    return app_row


def _criterion_for(app_row, criterion_id, field="criterion_id"):
    try:
        criterion_id = int(criterion_id)
    except (TypeError, ValueError):
        raise ValidationError("criterion_id must be an integer", field=field)
    crit = db.session.get(Criterion, criterion_id)
    if crit is None:
        raise NotFound(f"criterion {criterion_id} not found")
    if crit.year != app_row.year:
        raise ValidationError(f"criterion {crit.id} does not belong to {app_row.year}", field=field)
    if not crit.active:
        raise ValidationError(f"criterion {crit.id} is inactive", field=field)
    return crit


def _upsert_evaluation(application_id, criterion_id, score, evaluator, notes, now):
    _upsert(
        Evaluation,
        ["application_id", "criterion_id"],
        {
            "application_id": application_id,
            "criterion_id": criterion_id,
            "score": score,
            "notes": notes,
            "evaluator": evaluator,
            "scored_at": now,
        },
        ["score", "notes", "evaluator", "scored_at"],
    )


def submit_score(application_id, criterion_id, score, evaluator=None, notes=None):
    with transaction():
        app_row = load_application(application_id)
        crit = _criterion_for(app_row, criterion_id)
        value = validate_score(score, crit.max_points)
        _upsert_evaluation(app_row.id, crit.id, value, evaluator, notes, datetime.utcnow())
        recompute(app_row.id)
    current_app.logger.info('evaluation saved application=%s criterion=%s score=%s', app_row.id, crit.id, value)
    return app_row


def submit_batch(application_id, entries, evaluator=None):
    """Score several criteria of one application at once.

    All entries are validated before anything is written; one bad entry
    rejects the whole batch.
    """
    if not isinstance(entries, (list, tuple)) or not entries:
        raise ValidationError("entries must be a non-empty list", field="entries")
    with transaction():
        app_row = load_application(application_id)
        prepared = []
        seen = set()
        for idx, entry in enumerate(entries):
            prefix = f"entries[{idx}]"
            if not isinstance(entry, dict):
                raise ValidationError("each entry must be an object", field=prefix)
            crit = _criterion_for(app_row, entry.get("criterion_id"), field=f"{prefix}.criterion_id")
            if crit.id in seen:
                raise ValidationError(f"criterion {crit.id} appears twice", field=f"{prefix}.criterion_id")
            seen.add(crit.id)
            value = validate_score(entry.get("score"), crit.max_points, field=f"{prefix}.score")
            prepared.append((crit.id, value, entry.get("notes")))

        now = datetime.utcnow()
        for criterion_id, value, notes in prepared:
            _upsert_evaluation(app_row.id, criterion_id, value, evaluator, notes, now)
        recompute(app_row.id)
    current_app.logger.info('evaluation batch saved application=%s entries=%d', app_row.id, len(prepared))
    return app_row


def submit_interview_score(application_id, interviewer_id, score, notes=None):
    with transaction():
        app_row = load_application(application_id)
        interviewer = db.session.get(Interviewer, interviewer_id)
        if interviewer is None:
            raise NotFound(f"interviewer {interviewer_id} not found")
        if interviewer.year != app_row.year:
            raise ValidationError(f"interviewer {interviewer.id} does not belong to {app_row.year}", field="interviewer_id")
        value = validate_score(score, float(current_app.config.get("INTERVIEW_SCORE_MAX", 10)))
        _upsert(
            InterviewScore,
            ["application_id", "interviewer_id"],
            {
                "application_id": app_row.id,
                "interviewer_id": interviewer.id,
                "score": value,
                "notes": notes,
                "scored_at": datetime.utcnow(),
            },
            ["score", "notes", "scored_at"],
        )
        recompute(app_row.id)
    return app_row


def submit_criterion_score(application_id, criterion_id, evaluator_id, score):
    with transaction():
        app_row = load_application(application_id)
        crit = _criterion_for(app_row, criterion_id)
        value = validate_score(score, crit.max_points)
        _upsert(
            CriterionScore,
            ["application_id", "criterion_id", "evaluator_id"],
            {
                "application_id": app_row.id,
                "criterion_id": crit.id,
                "evaluator_id": evaluator_id,
                "score": value,
                "scored_at": datetime.utcnow(),
            },
            ["score", "scored_at"],
        )
        recompute(app_row.id)
    return app_row
