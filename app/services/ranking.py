"""Per-institution ranking of eligible applications."""
import csv
from datetime import datetime
from io import StringIO
from flask import current_app, render_template
from sqlalchemy import update
from ..extensions import db, rq
from ..errors import ValidationError, CapacityError
from ..models.application import Application
from ..models.institution import Institution
from ..models.notification import Notification
from ..jobs.notify import deliver_notification
from ..utils.db import transaction
from .scoring import load_application

# the one eligibility rule used for ranking and for evaluator listings
ELIGIBLE = (
    Application.status == "submitted",
    Application.validity_status == "valid",
)


def eligible_query(year):
    return Application.query.filter(Application.year == year, *ELIGIBLE)


def ranked_query(year):
    # accepted applicants keep their place in the list and the seat they hold
    return Application.query.filter(
        Application.year == year,
        Application.validity_status == "valid",
        Application.status.in_(("submitted", "accepted")),
    )


def ranking_order():
    # total desc, objective desc, earliest submission first (unsubmitted last), id
    return (
        Application.total_score.desc(),
        Application.objective_score.desc(),
        Application.submitted_at.is_(None),
        Application.submitted_at.asc(),
        Application.id.asc(),
    )


def _entry(app_row, position, advancing):
    return {
        "application_id": app_row.id,
        "candidate_id": app_row.candidate_id,
        "rank_position": position,
        "advancing_to_interview": advancing,
        "gpa": app_row.gpa,
        "objective_score": app_row.objective_score,
        "interview_score": app_row.interview_score,
        "external_score": app_row.external_score,
        "total_score": app_row.total_score,
    }


def generate_ranking(year, institution_id=None, persist=True):
    """Rank eligible applications of ``year`` within each selected institution.

    Returns one dict per institution that has at least one eligible
    application, ordered by institution name. Accepted applications stay in
    the list and count against ``available_spots``, so the interview flag only
    goes to as many submitted applications as there are seats left. With
    ``persist`` the positions and interview flags are written back and stale
    ranks in the same scope are cleared.
    """
    q = ranked_query(year).filter(Application.selected_institution_id.isnot(None))
    if institution_id is not None:
        q = q.filter(Application.selected_institution_id == institution_id)
    apps = q.order_by(*ranking_order()).all()

    groups = {}
    for a in apps:
        groups.setdefault(a.selected_institution_id, []).append(a)
    institutions = {}
    if groups:
        institutions = {i.id: i for i in Institution.query.filter(Institution.id.in_(list(groups))).all()}

    result = []
    ranked_ids = set()
    for inst_id, members in groups.items():
        inst = institutions[inst_id]
        spots = inst.available_spots or 0
        open_seats = max(spots - sum(1 for a in members if a.status == "accepted"), 0)
        entries = []
        for position, a in enumerate(members, start=1):
            if a.status == "accepted":
                advancing = True
            else:
                advancing = position <= spots and open_seats > 0
                if advancing:
                    open_seats -= 1
            if persist:
                a.rank_position = position
                a.advancing_to_interview = advancing
            ranked_ids.add(a.id)
            entries.append(_entry(a, position, advancing))
        result.append({
            "institution_id": inst.id,
            "institution_name": inst.name,
            "available_spots": spots,
            "entries": entries,
        })
    result.sort(key=lambda g: (g["institution_name"], g["institution_id"]))

    if persist:
        with transaction():
            stale = Application.query.filter(
                Application.year == year,
                Application.rank_position.isnot(None),
            )
            if institution_id is not None:
                stale = stale.filter(Application.selected_institution_id == institution_id)
            for a in stale.all():
                if a.id not in ranked_ids:
                    a.rank_position = None
                    a.advancing_to_interview = False
        current_app.logger.info(
            'ranking generated year=%s institution=%s groups=%d ranked=%d',
            year, institution_id, len(result), len(ranked_ids),
        )
    return result


def publish_ranking(year):
    """Notify each ranked applicant of their position, once."""
    groups = generate_ranking(year, persist=True)
    published = 0
    skipped = 0
    pending = []
    now = datetime.utcnow()
    with transaction():
        for group in groups:
            for entry in group["entries"]:
                app_row = db.session.get(Application, entry["application_id"])
                if app_row.ranking_published_at is not None:
                    skipped += 1
                    continue
                subject = f"Your ranking for {group['institution_name']} ({year})"
                body = render_template(
                    "mail/ranking_published.html",
                    candidate_id=app_row.candidate_id,
                    institution=group["institution_name"],
                    rank_position=entry["rank_position"],
                    total=len(group["entries"]),
                    advancing=entry["advancing_to_interview"],
                    year=year,
                )
                n = Notification(
                    application_id=app_row.id,
                    type="ranking_published",
                    sent_to=app_row.email,
                    subject=subject,
                    body=body,
                )
                db.session.add(n)
                app_row.ranking_published_at = now
                pending.append(n)
                published += 1

    for n in pending:
        rq.enqueue(deliver_notification, n.id)
    current_app.logger.info('ranking published year=%s published=%d skipped=%d', year, published, skipped)
    return {"published": published, "skipped": skipped}


def accept_application(application_id):
    """Take one seat of the selected institution for an advancing applicant.

    The seat counter only moves through a conditional UPDATE so two
    concurrent acceptances can never oversell an institution.
    """
    with transaction():
        app_row = load_application(application_id)
        if app_row.status == "accepted":
            return app_row
        if not app_row.advancing_to_interview or app_row.rank_position is None:
            raise ValidationError("application is not advancing to interview", field="advancing_to_interview")
        stmt = (
            update(Institution)
            .where(Institution.id == app_row.selected_institution_id)
            .where(Institution.filled_spots < Institution.available_spots)
            .values(filled_spots=Institution.filled_spots + 1)
        )
        res = db.session.execute(stmt)
        if res.rowcount == 0:
            raise CapacityError("no seats left at the selected institution", institution_id=app_row.selected_institution_id)
        app_row.status = "accepted"
    current_app.logger.info('application accepted id=%s institution=%s', app_row.id, app_row.selected_institution_id)
    return app_row


EXPORT_HEADERS = [
    "institution", "rank_position", "candidate_id", "advancing_to_interview",
    "objective_score", "interview_score", "external_score", "total_score",
]


def export_ranking_csv(year, institution_id=None):
    groups = generate_ranking(year, institution_id=institution_id, persist=False)
    text_buf = StringIO()
    writer = csv.writer(text_buf)
    writer.writerow(EXPORT_HEADERS)
    for group in groups:
        for e in group["entries"]:
            writer.writerow([
                group["institution_name"], e["rank_position"], e["candidate_id"],
                "yes" if e["advancing_to_interview"] else "no",
                e["objective_score"], e["interview_score"] if e["interview_score"] is not None else "",
                e["external_score"] if e["external_score"] is not None else "", e["total_score"],
            ])
    return text_buf.getvalue()
