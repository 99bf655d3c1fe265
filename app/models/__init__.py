from .tenant import Tenant
from .section import Section
from .question import Question
from .template import QuestionTemplate
from .applicant import Applicant
from .setting import Setting
# base and mixins are imported by the above as needed
