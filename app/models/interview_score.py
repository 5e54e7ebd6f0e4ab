from ..extensions import db
from .base import TimestampMixin


class InterviewScore(db.Model, TimestampMixin):
    """Single holistic score per interviewer (legacy interview flow)."""
    __tablename__ = "interview_scores"
    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id"), nullable=False, index=True)
    interviewer_id = db.Column(db.Integer, db.ForeignKey("interviewers.id"), nullable=False)
    score = db.Column(db.Float, nullable=False)
    notes = db.Column(db.Text)
    scored_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('application_id', 'interviewer_id', name='uq_interview_scores_application_interviewer'),
    )
