"""Score arithmetic for the applicant pipeline: point sums, AI averaging, routing."""

import math
from numbers import Real
from typing import Any, Dict, Iterable

from flask import current_app

from ..models.setting import SCORE_THRESHOLD_KEY, Setting
from .answers import ChoiceAnswer


def _as_number(value: Any) -> float:
    """Coerce a stored score/points value to a number, 0 when it is not one."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, Real):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return value
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return 0
        return parsed if math.isfinite(parsed) else 0
    return 0


def _option_points(options, value) -> float:
    for opt in options:
        if isinstance(opt, dict) and opt.get("value") == value:
            return _as_number(opt.get("points"))
    return 0


def manual_score(choices: Iterable[ChoiceAnswer]) -> int:
    """Sum the points of every selected option across radio/checkbox answers."""
    total = 0
    for choice in choices:
        for value in choice.selected:
            total += _option_points(choice.options, value)
    return int(round_half_up(total))


def question_mean(trait_scores: Dict[str, Any]) -> float:
    """Mean of one question's trait scores; non-numeric traits count as 0."""
    if not trait_scores:
        return 0.0
    values = [_as_number(v) for v in trait_scores.values()]
    return sum(values) / len(values)


def ai_score_total(ai_analysis: Dict[str, Dict[str, Any]]) -> float:
    # each question contributes its mean so rubrics with many traits don't dominate
    return sum(question_mean((entry or {}).get("trait_scores") or {}) for entry in ai_analysis.values())


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def final_score(manual: int, ai_total: float) -> int:
    return manual + round_half_up(ai_total)


def get_score_threshold(tenant_id: int) -> int:
    default = int(current_app.config.get("DEFAULT_SCORE_THRESHOLD", 75))
    raw = Setting.get_value(tenant_id, SCORE_THRESHOLD_KEY)
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        current_app.logger.warning('Invalid score_threshold %r for tenant %s, using %s', raw, tenant_id, default)
        return default


def route_status(score: int, threshold: int) -> str:
    if score >= threshold:
        return current_app.config.get("STATUS_PASS", "Interview")
    return current_app.config.get("STATUS_REVIEW", "Review")
