"""Fan rubric scoring for an applicant's free-text answers out to the oracle."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from flask import current_app

from . import openai_wrap
from .answers import AiAnswer
from .errors import OracleError


def _excerpt(text: str, n: int = 60) -> str:
    text = (text or '').replace('\n', ' ')
    return text if len(text) <= n else text[:n] + '...'


def _score_one(app, item: AiAnswer, applicant_id) -> Optional[Dict[str, Any]]:
    # worker threads don't inherit the caller's app context
    with app.app_context():
        try:
            result = openai_wrap.score_answer(item.rubric, item.text, item.points)
        except OracleError as e:
            app.logger.warning('AI scoring failed for applicant %s question %s: %s; answer=%r',
                               applicant_id, item.question_id, e, _excerpt(item.text))
            return None
        except Exception:
            app.logger.exception('Unexpected error scoring applicant %s question %s; answer=%r',
                                 applicant_id, item.question_id, _excerpt(item.text))
            return None
        app.logger.info('AI scoring done for applicant %s question %s: %s',
                        applicant_id, item.question_id, result.get('trait_scores'))
        return result


def dispatch_ai_scoring(items: List[AiAnswer], applicant_id=None) -> Dict[str, Dict[str, Any]]:
    """Score every AI question concurrently and return results for those that succeeded.

    A failed question is logged and left out; it never cancels the others.
    Returns only once every submitted call has finished.
    """
    if not items:
        return {}
    app = current_app._get_current_object()
    workers = max(1, min(int(app.config.get('AI_MAX_CONCURRENCY', 4)), len(items)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='ai-score') as pool:
        futures = [(item.question_id, pool.submit(_score_one, app, item, applicant_id)) for item in items]
        results = {}
        for qid, fut in futures:
            res = fut.result()
            if res is not None:
                results[qid] = res
    return results
