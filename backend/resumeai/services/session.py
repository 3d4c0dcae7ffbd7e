"""
Pure transitions over the per-client Session record.

Each function takes the current Session and returns a new one; the caller
owns storing it. Nothing here touches the network or shared state.
"""

from __future__ import annotations

import uuid
from dataclasses import replace

from resumeai.core import AnalysisResult
from resumeai.models import Session, UploadedDocument

JOB_FIELDS = ("title", "company", "description")


def new_session() -> Session:
    return Session(session_id=str(uuid.uuid4()))


def select_file(state: Session, document: UploadedDocument) -> Session:
    return replace(state, document=document, error=None)


def set_error(state: Session, message: str) -> Session:
    # a rejected re-selection keeps whatever document was already chosen
    return replace(state, error=message)


def update_job_details(state: Session, name: str, value: str) -> Session:
    if name not in JOB_FIELDS:
        raise ValueError(f"Unknown job field: {name}")
    return replace(state, job_details=state.job_details.model_copy(update={name: value}))


def begin_analysis(state: Session) -> Session:
    return replace(state, is_analyzing=True, error=None)


def complete_analysis(state: Session, result: AnalysisResult) -> Session:
    # the encoded file is only needed for the request; keep its metadata for the report
    document = replace(state.document, preview=None) if state.document else None
    return replace(state, document=document, is_analyzing=False, result=result, error=None)


def fail_analysis(state: Session, message: str) -> Session:
    return replace(state, is_analyzing=False, result=None, error=message)


def is_expired(state: Session, now: float, ttl_seconds: float) -> bool:
    """An in-flight session is never expired."""
    return not state.is_analyzing and now - state.created_at > ttl_seconds


def reset(state: Session) -> Session:
    """Back to a fresh upload form. Job details survive, as in the form."""
    return replace(state, document=None, result=None, error=None, is_analyzing=False)
