"""Passwordless access for external evaluators.

An interviewer's ``access_token`` is a bearer capability sent to them inside
a URL. Every request re-resolves the token; nothing is cached between calls.
Unknown, deactivated and expired tokens fail the same way, and so do
requests for records outside the interviewer's year.
"""
import secrets
from datetime import datetime, timedelta
from typing import NamedTuple
from flask import current_app, has_request_context, request, render_template
from ..extensions import db, rq
from ..errors import AccessDenied, NotFound, ValidationError
from ..models.application import Application
from ..models.criterion import Criterion
from ..models.criterion_score import CriterionScore
from ..models.interview_score import InterviewScore
from ..models.interviewer import Interviewer
from ..models.magic_link_access import MagicLinkAccess
from ..models.notification import Notification
from ..jobs.notify import deliver_notification
from ..utils.db import transaction
from . import scoring
from .criteria import list_criteria
from .ranking import eligible_query

PROFILE_FIELDS = ("name", "email", "institution", "specialty")


class EvaluatorSession(NamedTuple):
    interviewer_id: int
    name: str
    year: int


def new_token():
    return secrets.token_urlsafe(32)


def issue_token(interviewer, now=None):
    """Give the interviewer a fresh token; any previous one stops working."""
    now = now or datetime.utcnow()
    ttl_days = current_app.config.get("MAGIC_LINK_TTL_DAYS")
    interviewer.access_token = new_token()
    interviewer.token_issued_at = now
    interviewer.token_expires_at = now + timedelta(days=ttl_days) if ttl_days else None
    return interviewer.access_token


def get_interviewer(interviewer_id):
    interviewer = db.session.get(Interviewer, interviewer_id)
    if interviewer is None:
        raise NotFound(f"interviewer {interviewer_id} not found")
    return interviewer


def list_interviewers(year):
    return Interviewer.query.filter_by(year=year).order_by(Interviewer.name.asc(), Interviewer.id.asc()).all()


def create_interviewer(year, name, email, institution=None, specialty=None):
    if not (name or "").strip():
        raise ValidationError("name is required", field="name")
    if not (email or "").strip():
        raise ValidationError("email is required", field="email")
    with transaction():
        interviewer = Interviewer(
            year=year,
            name=name.strip(),
            email=email.strip(),
            institution=institution or None,
            specialty=specialty or None,
            active=True,
        )
        issue_token(interviewer)
        db.session.add(interviewer)
    current_app.logger.info('interviewer created id=%s year=%s', interviewer.id, year)
    return interviewer


def update_interviewer(interviewer_id, **fields):
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise ValidationError(f"unknown field(s): {', '.join(sorted(unknown))}", field=sorted(unknown)[0])
    with transaction():
        interviewer = get_interviewer(interviewer_id)
        for key, value in fields.items():
            if key in ("name", "email") and not (value or "").strip():
                raise ValidationError(f"{key} is required", field=key)
            setattr(interviewer, key, value.strip() if isinstance(value, str) else value)
    return interviewer


def regenerate_token(interviewer_id):
    with transaction():
        interviewer = get_interviewer(interviewer_id)
        issue_token(interviewer)
    current_app.logger.info('access token regenerated interviewer=%s', interviewer.id)
    return interviewer


def deactivate_interviewer(interviewer_id):
    with transaction():
        interviewer = get_interviewer(interviewer_id)
        if interviewer.active:
            interviewer.active = False
            interviewer.deactivated_at = datetime.utcnow()
    current_app.logger.info('interviewer deactivated id=%s', interviewer.id)
    return interviewer


def reactivate_interviewer(interviewer_id):
    # a reactivated interviewer gets a new link, the one from before deactivation stays dead
    with transaction():
        interviewer = get_interviewer(interviewer_id)
        if not interviewer.active:
            interviewer.active = True
            interviewer.deactivated_at = None
            issue_token(interviewer)
    current_app.logger.info('interviewer reactivated id=%s', interviewer.id)
    return interviewer


def access_link(interviewer):
    return current_app.config["MAGIC_LINK_BASE_URL"] + interviewer.access_token


def send_access_link(interviewer_id):
    with transaction():
        interviewer = get_interviewer(interviewer_id)
        if not interviewer.active:
            raise ValidationError("interviewer is deactivated", field="active")
        body = render_template(
            "mail/access_link.html",
            name=interviewer.name,
            year=interviewer.year,
            link=access_link(interviewer),
            expires_at=interviewer.token_expires_at,
        )
        n = Notification(
            interviewer_id=interviewer.id,
            type="access_link",
            sent_to=interviewer.email,
            subject=f"Your evaluator access link ({interviewer.year})",
            body=body,
        )
        db.session.add(n)
    rq.enqueue(deliver_notification, n.id)
    return n


def _token_hint(token):
    return (token or "")[:6]


def resolve_session(token):
    if not token:
        raise AccessDenied()
    interviewer = Interviewer.query.filter_by(access_token=token).first()
    if interviewer is None or not interviewer.token_is_live():
        current_app.logger.warning('magic link rejected token=%s...', _token_hint(token))
        raise AccessDenied()
    return EvaluatorSession(interviewer.id, interviewer.name, interviewer.year)


def _audit(session, action, application_id=None):
    remote_addr = request.remote_addr if has_request_context() else None
    db.session.add(MagicLinkAccess(
        interviewer_id=session.interviewer_id,
        action=action,
        application_id=application_id,
        remote_addr=remote_addr,
    ))


def _scoped_application(session, application_id):
    app_row = db.session.get(Application, application_id)
    if app_row is None or app_row.year != session.year or not app_row.is_rankable:
        raise AccessDenied()
    return app_row


def _scoped_criterion(session, criterion_id):
    crit = db.session.get(Criterion, criterion_id)
    if crit is None or crit.year != session.year or not crit.active:
        raise AccessDenied()
    return crit


def _own_scores(session, application_ids):
    by_app = {app_id: {} for app_id in application_ids}
    interview = {}
    if not application_ids:
        return by_app, interview
    rows = CriterionScore.query.filter(
        CriterionScore.evaluator_id == session.interviewer_id,
        CriterionScore.application_id.in_(application_ids),
    ).all()
    for r in rows:
        by_app[r.application_id][str(r.criterion_id)] = r.score
    for r in InterviewScore.query.filter(
        InterviewScore.interviewer_id == session.interviewer_id,
        InterviewScore.application_id.in_(application_ids),
    ).all():
        interview[r.application_id] = r.score
    return by_app, interview


def _project(app_row, my_scores, my_interview_score):
    # evaluator-facing view: no email or other contact details
    inst = app_row.selected_institution
    return {
        "application_id": app_row.id,
        "candidate_id": app_row.candidate_id,
        "institution": inst.name if inst else None,
        "my_scores": my_scores,
        "my_interview_score": my_interview_score,
    }


def list_assigned(token):
    session = resolve_session(token)
    criteria = list_criteria(session.year)
    apps = eligible_query(session.year).order_by(Application.candidate_id.asc(), Application.id.asc()).all()
    by_app, interview = _own_scores(session, [a.id for a in apps])
    out = {
        "evaluator": {"id": session.interviewer_id, "name": session.name, "year": session.year},
        "criteria": [c.to_dict() for c in criteria],
        "applications": [_project(a, by_app[a.id], interview.get(a.id)) for a in apps],
    }
    with transaction():
        _audit(session, "list")
    return out


def get_application_detail(token, application_id):
    session = resolve_session(token)
    app_row = _scoped_application(session, application_id)
    by_app, interview = _own_scores(session, [app_row.id])
    out = _project(app_row, by_app[app_row.id], interview.get(app_row.id))
    out["gpa"] = app_row.gpa
    out["criteria"] = [c.to_dict() for c in list_criteria(session.year)]
    with transaction():
        _audit(session, "detail", app_row.id)
    return out


def submit_criterion_score(token, application_id, criterion_id, score):
    session = resolve_session(token)
    crit = _scoped_criterion(session, criterion_id)
    app_row = _scoped_application(session, application_id)
    # written in the same transaction as the score, rolled back with it
    _audit(session, "criterion_score", app_row.id)
    scoring.submit_criterion_score(app_row.id, crit.id, session.interviewer_id, score)
    return {"application_id": app_row.id, "criterion_id": crit.id, "score": float(score)}


def submit_interview_score(token, application_id, score, notes=None):
    session = resolve_session(token)
    app_row = _scoped_application(session, application_id)
    _audit(session, "interview_score", app_row.id)
    scoring.submit_interview_score(app_row.id, session.interviewer_id, score, notes=notes)
    return {"application_id": app_row.id, "score": float(score)}
