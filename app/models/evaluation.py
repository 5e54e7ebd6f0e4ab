from ..extensions import db
from .base import TimestampMixin


class Evaluation(db.Model, TimestampMixin):
    """Internal (admin) score for one criterion of one application."""
    __tablename__ = "evaluations"
    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id"), nullable=False, index=True)
    criterion_id = db.Column(db.Integer, db.ForeignKey("criteria.id"), nullable=False)
    score = db.Column(db.Float, nullable=False)
    notes = db.Column(db.Text)
    evaluator = db.Column(db.String(255))  # admin email or name
    scored_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('application_id', 'criterion_id', name='uq_evaluations_application_criterion'),
    )
