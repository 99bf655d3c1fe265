"""Rubric scoring of free-text answers through the OpenAI Responses API.

We call the Responses HTTP API directly with `requests` rather than through the
`openai` SDK so the request/retry behaviour stays under our control. Every
failure surfaces as ``OracleError``; callers decide what a failure means.
"""

import json
import random
import re
import time
from typing import Any, Dict, List

import requests
from flask import current_app

from .errors import OracleError


OPENAI_URL = 'https://api.openai.com/v1/responses'
FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def build_prompt(rubric: List[str], answer_text: str, max_points: int) -> str:
    prompt_lines = [
        "You are an expert hiring assistant. Analyze a job applicant's response to a behavioral question "
        f"and score it on a scale of 0 to {max_points} for each of the traits listed below.",
        "Return ONLY a JSON object with two keys:",
        f'- "trait_scores": an object mapping each trait name to a number between 0 and {max_points}.',
        '- "analysis": an object mapping each trait name to a one or two sentence justification.',
        "--",
        "Traits:",
    ]
    prompt_lines += [f"- {t}" for t in rubric]
    prompt_lines += ["--", "Applicant's answer:", answer_text]
    return "\n".join(prompt_lines)


def _response_text(jr: Any) -> str:
    """Pull the generated text out of a Responses API payload."""
    if not isinstance(jr, dict):
        return ''
    text = jr.get('output_text') or ''
    if text:
        return text
    parts = []
    for item in jr.get('output') or []:
        if isinstance(item, dict):
            for c in item.get('content') or []:
                if isinstance(c, dict) and 'text' in c:
                    parts.append(c['text'])
                elif isinstance(c, str):
                    parts.append(c)
        elif isinstance(item, str):
            parts.append(item)
    return '\n'.join(parts)


def parse_scoring_reply(text: str) -> Dict[str, Dict[str, Any]]:
    """Turn the model's reply into ``{"trait_scores": {...}, "analysis": {...}}``.

    Code fences around the JSON are stripped. A bare ``{trait: score}`` object
    is accepted as the trait scores. Raises ``OracleError`` when no usable
    object can be recovered.
    """
    cleaned = FENCE_RE.sub('', text or '').strip()
    if not cleaned:
        raise OracleError('empty scoring reply')
    try:
        data = json.loads(cleaned)
    except ValueError:
        m = OBJECT_RE.search(cleaned)
        if not m:
            raise OracleError(f'scoring reply is not JSON: {cleaned[:200]!r}')
        try:
            data = json.loads(m.group(0))
        except ValueError as e:
            raise OracleError(f'scoring reply is not JSON: {e}') from e

    if not isinstance(data, dict):
        raise OracleError(f'scoring reply is a {type(data).__name__}, expected an object')

    trait_scores = data.get('trait_scores')
    if trait_scores is None:
        if data and 'analysis' not in data and all(not isinstance(v, (dict, list)) for v in data.values()):
            trait_scores = data
        else:
            raise OracleError('scoring reply has no trait_scores')
    if not isinstance(trait_scores, dict):
        raise OracleError('trait_scores is not an object')

    analysis = data.get('analysis') if trait_scores is not data else None
    if not isinstance(analysis, dict):
        analysis = {}
    return {
        'trait_scores': dict(trait_scores),
        'analysis': {k: str(v) for k, v in analysis.items()},
    }


def _retry_wait(resp, backoff):
    ra = resp.headers.get('Retry-After') if resp is not None else None
    if ra:
        try:
            return float(ra)
        except ValueError:
            # Retry-After may be an HTTP-date; use our own backoff instead
            pass
    return backoff


def score_answer(rubric: List[str], answer_text: str, max_points: int) -> Dict[str, Dict[str, Any]]:
    """Score ``answer_text`` against ``rubric`` traits, each out of ``max_points``.

    Retries 429/5xx and network errors with exponential backoff (honouring
    ``Retry-After``) up to ``OPENAI_MAX_ATTEMPTS``. Each HTTP call is bounded
    by ``OPENAI_TIMEOUT_SEC``.
    """
    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        raise OracleError('OPENAI_API_KEY is not configured')

    headers = {'Authorization': f'Bearer {api_key}', 'Content-Type': 'application/json'}
    body = {
        'model': current_app.config.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'input': build_prompt(rubric, answer_text, max_points),
        'max_output_tokens': 800,
        'temperature': 0.2,
    }
    timeout = float(current_app.config.get('OPENAI_TIMEOUT_SEC', 30))
    max_attempts = max(1, int(current_app.config.get('OPENAI_MAX_ATTEMPTS', 3)))

    backoff = 1.0
    last_error = None
    for attempt in range(1, max_attempts + 1):
        try:
            r = requests.post(OPENAI_URL, headers=headers, json=body, timeout=timeout)
        except requests.exceptions.RequestException as e:
            # network-level error or timeout
            last_error = e
            current_app.logger.warning('OpenAI network error, attempt %s/%s: %s', attempt, max_attempts, e)
            if attempt < max_attempts:
                time.sleep(backoff + random.uniform(0, 0.5))
                backoff *= 2
            continue

        if r.status_code == 429 or 500 <= r.status_code < 600:
            body_text = r.text or ''
            if 'insufficient_quota' in body_text:
                raise OracleError(f'OpenAI quota exhausted: {body_text[:500]}')
            last_error = OracleError(f'OpenAI returned {r.status_code}')
            if attempt < max_attempts:
                wait = _retry_wait(r, backoff)
                current_app.logger.warning('OpenAI returned %s, attempt %s/%s, retrying in %ss',
                                           r.status_code, attempt, max_attempts, wait)
                time.sleep(wait + random.uniform(0, 0.5))
                backoff *= 2
            continue

        if r.status_code >= 400:
            raise OracleError(f'OpenAI HTTP error {r.status_code}: {(r.text or "")[:500]}')

        try:
            jr = r.json()
        except ValueError as e:
            raise OracleError('OpenAI response body is not JSON') from e
        return parse_scoring_reply(_response_text(jr))

    raise OracleError(f'OpenAI request failed after {max_attempts} attempts: {last_error}')
