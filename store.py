import logging
import threading
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional

from errors import AssessmentNotFoundError
from schema import Domain, DomainAverages, HealthAssessment, Response
from services import resolve_domain, round_half_up

logger = logging.getLogger(__name__)


class AssessmentStore:
    """In-memory record of completed health assessments."""

    def __init__(self):
        self._records: Dict[int, HealthAssessment] = {}
        self._ids = count(1)
        self._lock = threading.Lock()

    def create(self, user_id: str, domain, score: int, responses: List[Response]) -> HealthAssessment:
        domain = resolve_domain(domain)
        with self._lock:
            record = HealthAssessment(
                id=next(self._ids),
                user_id=user_id,
                assessment_type=domain,
                score=score,
                responses=list(responses),
                completed_at=datetime.now(timezone.utc),
            )
            self._records[record.id] = record
        logger.info(f"Stored {domain.value} assessment #{record.id} for user {user_id} (score={score})")
        return record

    def list_for_user(self, user_id: str) -> List[HealthAssessment]:
        # Newest first; id breaks ties between records stored in the same instant
        with self._lock:
            records = [r for r in self._records.values() if r.user_id == user_id]
        return sorted(records, key=lambda r: (r.completed_at, r.id), reverse=True)

    def latest(self, user_id: str, domain) -> Optional[HealthAssessment]:
        domain = resolve_domain(domain)
        return next((r for r in self.list_for_user(user_id) if r.assessment_type == domain), None)

    def require_latest(self, user_id: str, domain) -> HealthAssessment:
        record = self.latest(user_id, domain)
        if record is None:
            raise AssessmentNotFoundError(
                f"No {resolve_domain(domain).value} assessment for user {user_id}"
            )
        return record

    def averages(self, user_id: str) -> DomainAverages:
        records = self.list_for_user(user_id)
        average_scores = {}
        for domain in Domain:
            scores = [r.score for r in records if r.assessment_type == domain]
            average_scores[domain] = round_half_up(sum(scores) / len(scores)) if scores else 0
        return DomainAverages(
            user_id=user_id,
            total_assessments=len(records),
            average_scores=average_scores,
        )
