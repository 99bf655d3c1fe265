"""Split an applicant's raw answer map into the parts the scoring job cares about.

Answer shapes depend on the question type, so they are resolved here once and
the scorers only ever see ``ChoiceAnswer`` / ``AiAnswer`` records.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.question import AI_TYPE, CHOICE_TYPES


# checked in this order; first keyword found in the question text wins
CONTACT_KEYWORDS = ("email", "phone", "name")


@dataclass
class ChoiceAnswer:
    question_id: str
    kind: str                      # "radio" or "checkbox-group"
    options: List[Dict[str, Any]]
    selected: List[str]


@dataclass
class AiAnswer:
    question_id: str
    rubric: List[str]
    points: int
    text: str


@dataclass
class ClassifiedAnswers:
    contact: Dict[str, str] = field(default_factory=dict)
    choice: List[ChoiceAnswer] = field(default_factory=list)
    ai: List[AiAnswer] = field(default_factory=list)


def _contact_key(question_text: Optional[str]) -> Optional[str]:
    text = (question_text or "").lower()
    for kw in CONTACT_KEYWORDS:
        if kw in text:
            return kw
    return None


def _selected_values(kind: str, answer: Any) -> List[str]:
    if answer is None or answer == "":
        return []
    if kind == "radio":
        if isinstance(answer, dict):
            # older forms stored radios as {value: true}; only one selection counts
            for value, checked in answer.items():
                if checked:
                    return [value]
            return []
        return [str(answer)]
    # checkbox-group
    if isinstance(answer, dict):
        return [value for value, checked in answer.items() if checked]
    if isinstance(answer, (list, tuple)):
        return [str(v) for v in answer]
    return []


def classify_answers(questions: Dict[str, Any], answers: Dict[str, Any]) -> ClassifiedAnswers:
    """Partition ``answers`` by the type of the question each one belongs to.

    ``questions`` maps question id to a ``Question`` (anything exposing
    ``type``, ``question_text``, ``options``, ``scoring_rubric`` and
    ``points``) and must be in form layout order: when several contact
    questions match the same keyword, the earliest one on the form wins.
    Answers to unknown question ids are ignored.
    """
    out = ClassifiedAnswers()
    answers = answers or {}
    for qid, question in questions.items():
        if qid not in answers:
            continue
        answer = answers[qid]
        qtype = question.type
        if qtype == "short-text":
            key = _contact_key(question.question_text)
            if key and isinstance(answer, str) and answer.strip() and key not in out.contact:
                out.contact[key] = answer.strip()
        elif qtype in CHOICE_TYPES:
            out.choice.append(ChoiceAnswer(
                question_id=qid,
                kind=qtype,
                options=list(question.options or []),
                selected=_selected_values(qtype, answer),
            ))
        elif qtype == AI_TYPE:
            if isinstance(answer, str) and answer.strip():
                out.ai.append(AiAnswer(
                    question_id=qid,
                    rubric=list(question.scoring_rubric or []),
                    points=question.points or 0,
                    text=answer,
                ))
    return out
