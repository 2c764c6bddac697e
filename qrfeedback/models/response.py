import json
import uuid
from ..extensions import db
from ..utils.dates import utcnow


class FeedbackResponse(db.Model):
    __tablename__ = "responses"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    form_id = db.Column(db.String(36), db.ForeignKey("forms.id"), nullable=False, index=True)
    answers_json = db.Column("answers", db.Text, nullable=False, default="[]")  # JSON list
    submitted_at = db.Column(db.DateTime, default=utcnow, index=True)

    @property
    def answers(self) -> list:
        return json.loads(self.answers_json or "[]")

    @answers.setter
    def answers(self, value):
        self.answers_json = json.dumps(value or [])

    def __repr__(self):
        return f"<FeedbackResponse {self.id} form={self.form_id}>"
