from ..extensions import db
from .base import TimestampMixin


class CriterionScore(db.Model, TimestampMixin):
    """Per-criterion score from an external evaluator (magic-link flow)."""
    __tablename__ = "criterion_scores"
    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id"), nullable=False, index=True)
    criterion_id = db.Column(db.Integer, db.ForeignKey("criteria.id"), nullable=False)
    evaluator_id = db.Column(db.Integer, db.ForeignKey("interviewers.id"), nullable=False)
    score = db.Column(db.Float, nullable=False)
    scored_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('application_id', 'criterion_id', 'evaluator_id', name='uq_criterion_scores_key'),
    )
