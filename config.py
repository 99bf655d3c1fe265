import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///applicants.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TIMEOUT_SEC = float(os.getenv("OPENAI_TIMEOUT_SEC", "30"))
    OPENAI_MAX_ATTEMPTS = int(os.getenv("OPENAI_MAX_ATTEMPTS", "3"))
    # fan-out limit for rubric scoring calls within one applicant
    AI_MAX_CONCURRENCY = int(os.getenv("AI_MAX_CONCURRENCY", "4"))
    DEFAULT_SCORE_THRESHOLD = int(os.getenv("DEFAULT_SCORE_THRESHOLD", "75"))
    STATUS_PASS = os.getenv("STATUS_PASS", "Interview")
    STATUS_REVIEW = os.getenv("STATUS_REVIEW", "Review")
    PROCESS_JOB_RETRIES = int(os.getenv("PROCESS_JOB_RETRIES", "3"))
