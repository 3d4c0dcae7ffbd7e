import os
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# .env.local wins over .env; real environment wins over both
load_dotenv(".env.local")
load_dotenv()

ENV = os.getenv("ENV", "dev").lower()
IS_PROD = ENV in {"prod", "production"}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()
]

SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_MINUTES", "60")) * 60

MAX_FILE_MB = 100
MAX_FILE_BYTES = MAX_FILE_MB * 1024 * 1024

ALLOWED_MIME_TYPES = {"application/pdf", "image/png", "image/jpeg", "image/webp"}

PLACEHOLDER_API_KEY = "PLACEHOLDER_API_KEY"
DEFAULT_MODEL = "gemini-3-flash-preview"


def gemini_api_key() -> Optional[str]:
    # read at call time so a key added to the environment is picked up without a restart
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def gemini_model() -> str:
    return os.getenv("GEMINI_MODEL", DEFAULT_MODEL)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class JobDetails(_CamelModel):
    title: str = ""
    company: str = ""
    description: str = ""


class JobDetailsUpdate(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None


class Improvement(_CamelModel):
    category: str
    description: str
    impact: Literal["High", "Medium", "Low"]


class SpellingError(_CamelModel):
    original: str
    suggestion: str
    context: str


class JobAlignment(_CamelModel):
    match_percentage: int = Field(ge=0, le=100)
    missing_keywords: List[str]
    suggested_keywords: List[str]
    role_fit_summary: str


class AnalysisResult(_CamelModel):
    """Structured feedback returned by the remote model.

    Every field is required; a reply missing any of them is rejected rather
    than filled with defaults.
    """

    overall_score: int = Field(ge=0, le=100)
    summary: str
    strengths: List[str]
    weaknesses: List[str]
    improvements: List[Improvement]
    spelling_errors: List[SpellingError]
    job_alignment: JobAlignment


class DocumentInfo(BaseModel):
    file_name: str
    mime_type: str
    size_bytes: int
    size_mb: float


class SessionResponse(BaseModel):
    status: bool = True
    session_id: str
    document: Optional[DocumentInfo] = None
    job_details: JobDetails
    is_analyzing: bool = False
    has_result: bool = False
    error: Optional[str] = None
