"""Score aggregation.

``recompute`` is the only writer of the derived score columns on
``Application``. Every score write calls it inside the same transaction.
"""
from datetime import datetime
from sqlalchemy import func
from ..extensions import db
from ..errors import NotFound
from ..models.application import Application
from ..models.criterion import Criterion
from ..models.evaluation import Evaluation
from ..models.interview_score import InterviewScore
from ..models.criterion_score import CriterionScore


def _round(value):
    return round(value, 4) if value is not None else None


def objective_sum(application_id):
    q = (
        db.session.query(func.sum(Evaluation.score * Criterion.weight))
        .join(Criterion, Criterion.id == Evaluation.criterion_id)
        .filter(Evaluation.application_id == application_id)
        .filter(Criterion.active.is_(True))
        .filter(Criterion.category == "objective")
    )
    return float(q.scalar() or 0.0)


def interview_mean(application_id):
    value = db.session.query(func.avg(InterviewScore.score)).filter(InterviewScore.application_id == application_id).scalar()
    return float(value) if value is not None else None


def external_averages(application_id):
    """Average external score per active criterion: {criterion_id: (avg, weight)}."""
    per_criterion = (
        db.session.query(
            CriterionScore.criterion_id.label("criterion_id"),
            func.avg(CriterionScore.score).label("avg_score"),
        )
        .filter(CriterionScore.application_id == application_id)
        .group_by(CriterionScore.criterion_id)
        .subquery()
    )
    rows = (
        db.session.query(per_criterion.c.criterion_id, per_criterion.c.avg_score, Criterion.weight)
        .join(Criterion, Criterion.id == per_criterion.c.criterion_id)
        .filter(Criterion.active.is_(True))
        .all()
    )
    return {r.criterion_id: (float(r.avg_score), float(r.weight)) for r in rows}


def recompute(application_id):
    """Refresh objective/interview/external/total scores of one application.

    Flushes but does not commit; the caller owns the transaction.
    """
    app_row = db.session.get(Application, application_id)
    if app_row is None:
        raise NotFound(f"application {application_id} not found")

    objective = objective_sum(application_id)
    interview = interview_mean(application_id)
    external = external_averages(application_id)

    app_row.objective_score = _round(objective)
    app_row.interview_score = _round(interview)
    # external per-criterion scores are reported next to the total, not inside it
    app_row.external_score = _round(sum(avg * weight for avg, weight in external.values())) if external else None
    app_row.total_score = _round(objective + (interview or 0.0))
    app_row.scores_updated_at = datetime.utcnow()
    db.session.flush()
    return app_row


def recompute_year(year, commit=True):
    ids = [r.id for r in db.session.query(Application.id).filter(Application.year == year).order_by(Application.id).all()]
    for app_id in ids:
        recompute(app_id)
    if commit:
        db.session.commit()
    return len(ids)


def score_breakdown(application_id):
    app_row = db.session.get(Application, application_id)
    if app_row is None:
        raise NotFound(f"application {application_id} not found")

    internal = {
        ev.criterion_id: ev
        for ev in Evaluation.query.filter_by(application_id=application_id).all()
    }
    external = external_averages(application_id)
    rows = []
    criteria = (
        Criterion.query.filter_by(year=app_row.year)
        .order_by(Criterion.sort_order.asc(), Criterion.id.asc())
        .all()
    )
    for crit in criteria:
        ev = internal.get(crit.id)
        ext = external.get(crit.id)
        counted = crit.active and crit.category == "objective" and ev is not None
        rows.append({
            "criterion_id": crit.id,
            "name": crit.display_name or crit.name,
            "category": crit.category,
            "active": crit.active,
            "max_points": crit.max_points,
            "weight": crit.weight,
            "score": ev.score if ev else None,
            "weighted": _round(ev.score * crit.weight) if counted else None,
            "external_average": _round(ext[0]) if ext else None,
            "notes": ev.notes if ev else None,
        })
    interviews = InterviewScore.query.filter_by(application_id=application_id).order_by(InterviewScore.id).all()
    return {
        "application_id": app_row.id,
        "candidate_id": app_row.candidate_id,
        "criteria": rows,
        "interview_scores": [{"interviewer_id": s.interviewer_id, "score": s.score} for s in interviews],
        "objective_score": app_row.objective_score,
        "interview_score": app_row.interview_score,
        "external_score": app_row.external_score,
        "total_score": app_row.total_score,
        "rank_position": app_row.rank_position,
    }
