import os
import json
import logging
from types import MappingProxyType

from dotenv import load_dotenv

from schema import AssessmentQuestion, Domain

load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    def __init__(self, data_dir=None):
        base_path = data_dir or os.getenv("WELLNESS_DATA_DIR") or os.path.dirname(os.path.abspath(__file__))

        self.questions_path = os.path.join(base_path, "questions.json")
        self.rules_path = os.path.join(base_path, "rules.json")

        self.log_level = os.getenv("WELLNESS_LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("WELLNESS_CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        self.rules = self._load_json(self.rules_path)
        self.question_bank = self._build_question_bank(self._load_json(self.questions_path))

    def _load_json(self, path):
        if not os.path.exists(path):
            raise FileNotFoundError(f"Missing config file: {path}")
        with open(path, 'r') as f:
            return json.load(f)

    def _build_question_bank(self, raw):
        assessment = raw.get("assessment", {})
        missing = [d.value for d in Domain if d.value not in assessment]
        if missing:
            raise ValueError(f"Question bank is missing domains: {', '.join(missing)}")

        bank = {}
        for domain in Domain:
            questions = tuple(AssessmentQuestion(**q) for q in assessment[domain.value])
            ids = [q.id for q in questions]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate question ids in {domain.value} question bank")
            bank[domain] = questions

        logger.info(
            f"Loaded question bank v{raw.get('version', '?')}: "
            + ", ".join(f"{d.value}={len(qs)}" for d, qs in bank.items())
        )
        return MappingProxyType(bank)


# Expose a shared instance of the config
config = Config()
