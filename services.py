import math
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from config import config
from errors import UnknownDomainError
from schema import (
    AssessmentQuestion,
    AssessmentReport,
    Domain,
    HealthScores,
    HealthScoreSummary,
    Response,
)

logger = logging.getLogger(__name__)


def resolve_domain(domain: Any) -> Domain:
    if isinstance(domain, Domain):
        return domain
    try:
        return Domain(domain)
    except ValueError:
        raise UnknownDomainError(domain) from None


def questions_for(domain: Any, settings=None) -> List[AssessmentQuestion]:
    """Return the ordered question bank of a domain."""
    return list((settings or config).question_bank[resolve_domain(domain)])


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------
# SCORE CALCULATION
# ---------------------------
def _response_fields(response: Any) -> Tuple[Optional[str], Any]:
    if isinstance(response, Response):
        return response.question_id, response.value
    if isinstance(response, Mapping):
        question_id = response.get("question_id", response.get("questionId"))
        if not isinstance(question_id, str):
            question_id = None
        return question_id, response.get("value")
    return None, None


def normalize_response(question: AssessmentQuestion, value: Any) -> float:
    """Map one raw answer index onto 0-100, honouring the question's polarity.

    Booleans, non-numeric and non-finite values score 0. Out-of-range indexes
    are clamped so a single bad answer cannot push the aggregate past the
    0-100 bounds, including integers too large to convert to float.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if isinstance(value, float) and not math.isfinite(value):
        return 0.0

    try:
        numeric = float(value)
    except OverflowError:
        numeric = math.inf if value > 0 else -math.inf

    max_value = question.max_value
    if question.reversed:
        normalized = (max_value - numeric) / max_value * 100
    else:
        normalized = numeric / max_value * 100
    return min(100.0, max(0.0, normalized))


def calculate_score(responses: Sequence[Any], questions: Sequence[AssessmentQuestion]) -> int:
    """Weighted mean of per-question normalized scores, rounded half up.

    Responses whose question id is not in ``questions`` are skipped. Returns 0
    when nothing matched.
    """
    by_id = {q.id: q for q in questions}
    total_score = 0.0
    total_weight = 0.0

    for response in responses:
        question_id, value = _response_fields(response)
        question = by_id.get(question_id)
        if question is None:
            logger.debug(f"Skipping response for unknown question '{question_id}'")
            continue

        total_score += normalize_response(question, value) * question.weight
        total_weight += question.weight

    return round_half_up(total_score / total_weight) if total_weight > 0 else 0


# ---------------------------
# INTERPRETATION
# ---------------------------
def get_tier(score: int, rules: Optional[Dict[str, Any]] = None) -> str:
    bands = sorted((rules or config.rules)["score_bands"], key=lambda b: b["min_score"], reverse=True)
    for band in bands:
        if score >= band["min_score"]:
            return band["name"]
    return bands[-1]["name"]


def interpretation(score: int, domain: Any, rules: Optional[Dict[str, Any]] = None) -> str:
    rules = rules or config.rules
    domain = resolve_domain(domain)
    return rules["interpretations"][domain.value][get_tier(score, rules)]


def recommendations(score: int, domain: Any, rules: Optional[Dict[str, Any]] = None) -> List[str]:
    # Lower scores add items on top of the higher tiers' items, never replace them
    rules = rules or config.rules
    domain = resolve_domain(domain)
    tiers = sorted(rules["recommendations"][domain.value], key=lambda t: t["below"], reverse=True)

    result = []
    for tier in tiers:
        if score < tier["below"]:
            result.extend(tier["items"])
    return result


class AssessmentService:
    def __init__(self, settings=None):
        self.settings = settings or config

    def questions_for(self, domain: Any) -> List[AssessmentQuestion]:
        return questions_for(domain, self.settings)

    def all_questions(self) -> Dict[str, List[AssessmentQuestion]]:
        return {d.value: list(qs) for d, qs in self.settings.question_bank.items()}

    def score(self, domain: Any, responses: Sequence[Any]) -> int:
        return calculate_score(responses, self.questions_for(domain))

    def build_report(self, domain: Any, responses: Sequence[Any]) -> AssessmentReport:
        domain = resolve_domain(domain)
        questions = self.questions_for(domain)
        known_ids = {q.id for q in questions}
        answered = {qid for qid, _ in map(_response_fields, responses) if qid in known_ids}

        score = calculate_score(responses, questions)
        if len(answered) < len(questions):
            logger.info(f"Scored partial {domain.value} assessment: {len(answered)}/{len(questions)} answered")

        return AssessmentReport(
            domain=domain,
            score=score,
            interpretation=interpretation(score, domain, self.settings.rules),
            recommendations=recommendations(score, domain, self.settings.rules),
            questions_answered=len(answered),
            total_questions=len(questions),
        )

    def summarize(self, scores: HealthScores) -> HealthScoreSummary:
        overall = round_half_up((scores.mental + scores.physical + scores.cognitive) / 3)
        return HealthScoreSummary(
            mental=scores.mental,
            physical=scores.physical,
            cognitive=scores.cognitive,
            overall=overall,
        )
