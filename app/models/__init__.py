from .user import User
from .institution import Institution
from .application import Application
from .criterion import Criterion
from .evaluation import Evaluation
from .interviewer import Interviewer
from .interview_score import InterviewScore
from .criterion_score import CriterionScore
from .magic_link_access import MagicLinkAccess
from .notification import Notification
# base and mixins are imported by the above as needed
