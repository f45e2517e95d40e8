import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict, List
from schema import (
    AssessmentQuestion,
    AssessmentReport,
    AssessmentRequest,
    DomainAverages,
    HealthAssessment,
    HealthAssessmentCreate,
    HealthScores,
    HealthScoreSummary,
)

from services import AssessmentService
from store import AssessmentStore
from errors import AssessmentNotFoundError, UnknownDomainError
from config import config

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Wellness Assessment API")

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

service = AssessmentService()
store = AssessmentStore()


def _not_found(e: Exception) -> HTTPException:
    logger.warning(str(e))
    return HTTPException(status_code=404, detail=str(e))


@app.get("/questions")
async def get_questions() -> Dict[str, List[AssessmentQuestion]]:
    return service.all_questions()

@app.get("/questions/{domain}")
async def get_domain_questions(domain: str) -> List[AssessmentQuestion]:
    try:
        return service.questions_for(domain)
    except UnknownDomainError as e:
        raise _not_found(e)

@app.post("/assess/{domain}")
async def assess(domain: str, request: AssessmentRequest) -> AssessmentReport:
    try:
        return service.build_report(domain, request.responses)
    except UnknownDomainError as e:
        raise _not_found(e)

@app.post("/health-summary")
async def health_summary(scores: HealthScores) -> HealthScoreSummary:
    return service.summarize(scores)

@app.post("/api/health-assessments")
async def create_health_assessment(payload: HealthAssessmentCreate) -> HealthAssessment:
    score = payload.score
    if score is None:
        score = service.score(payload.assessment_type, payload.responses)
    return store.create(payload.user_id, payload.assessment_type, score, payload.responses)

@app.get("/api/health-assessments/{user_id}")
async def get_health_assessments(user_id: str) -> List[HealthAssessment]:
    return store.list_for_user(user_id)

@app.get("/api/health-assessments/{user_id}/latest/{domain}")
async def get_latest_health_assessment(user_id: str, domain: str) -> HealthAssessment:
    try:
        return store.require_latest(user_id, domain)
    except (UnknownDomainError, AssessmentNotFoundError) as e:
        raise _not_found(e)

@app.get("/api/health-assessments/{user_id}/averages")
async def get_average_scores(user_id: str) -> DomainAverages:
    return store.averages(user_id)
