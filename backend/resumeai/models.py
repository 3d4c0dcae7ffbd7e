from dataclasses import dataclass, field
from typing import Optional
import time

from resumeai.core import AnalysisResult, JobDetails


@dataclass(frozen=True)
class UploadedDocument:
    file_name: str
    mime_type: str
    size_bytes: int
    preview: Optional[str]  # data:<mime>;base64,<payload>; dropped once analyzed


@dataclass(frozen=True)
class Session:
    session_id: str
    created_at: float = field(default_factory=lambda: time.time())
    document: Optional[UploadedDocument] = None
    job_details: JobDetails = field(default_factory=JobDetails)
    is_analyzing: bool = False
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
