import time
from typing import Optional

from fastapi import FastAPI, UploadFile, File, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from resumeai.ai import analyze_resume
from resumeai.core import ENV, IS_PROD, CORS_ORIGINS, SESSION_TTL_SECONDS, DocumentInfo, JobDetails, JobDetailsUpdate, SessionResponse
from resumeai.errors import ResumeAIError, UnknownError
from resumeai.logger import setup_logger
from resumeai.models import Session, UploadedDocument
from resumeai.services.encode import encode_document, split_data_uri
from resumeai.services.report import render_dashboard
from resumeai.services.report_pdf import build_pdf
from resumeai.services.session import (
    begin_analysis,
    complete_analysis,
    fail_analysis,
    is_expired,
    new_session,
    reset,
    select_file,
    set_error,
    update_job_details,
)
from resumeai.services.validate import validate_file, validate_submission

setup_logger()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["5/day"] if IS_PROD else [],
)

rate_limit = limiter.limit("5/day") if IS_PROD else (lambda fn: fn)

app = FastAPI(title="ResumeAI ATS Resume Auditor", version="0.1.0")
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

sessions: dict[str, Session] = {}


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"status": False, "message": "Rate limit exceeded: 5 free uses/day per IP."},
    )


@app.exception_handler(ResumeAIError)
def resumeai_error_handler(request: Request, exc: ResumeAIError):
    return JSONResponse(status_code=exc.status_code, content={"status": False, "message": exc.message})


def _get_session(session_id: str) -> Session:
    session = sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _view(session: Session) -> SessionResponse:
    doc = session.document
    info = None
    if doc:
        info = DocumentInfo(
            file_name=doc.file_name,
            mime_type=doc.mime_type,
            size_bytes=doc.size_bytes,
            size_mb=round(doc.size_bytes / (1024 * 1024), 2),
        )
    return SessionResponse(
        session_id=session.session_id,
        document=info,
        job_details=session.job_details,
        is_analyzing=session.is_analyzing,
        has_result=session.result is not None,
        error=session.error,
    )


def _prune_sessions(now: float) -> None:
    for sid in [sid for sid, s in sessions.items() if is_expired(s, now, SESSION_TTL_SECONDS)]:
        del sessions[sid]
        logger.info(f"Session {sid}: expired")


async def _read_document(resume: UploadFile) -> UploadedDocument:
    mime_type = (resume.content_type or "").lower()

    # reject on the declared size before buffering the body
    if resume.size is not None:
        try:
            validate_file(resume.size, mime_type)
        except ResumeAIError:
            await resume.close()
            raise

    contents = await resume.read()
    await resume.close()
    validate_file(len(contents), mime_type)

    preview = await encode_document(contents, mime_type)
    return UploadedDocument(
        file_name=resume.filename or "resume",
        mime_type=mime_type,
        size_bytes=len(contents),
        preview=preview,
    )


@app.get("/", tags=["default"])
def root():
    return {"status": "ok", "service": "ResumeAI", "docs": "/docs"}


@app.get("/health", tags=["default"])
def health():
    return {"ok": True, "env": ENV, "rate_limit_enabled": IS_PROD}


@app.post("/api/sessions", response_model=SessionResponse, tags=["session"])
def create_session():
    _prune_sessions(time.time())
    session = new_session()
    sessions[session.session_id] = session
    return _view(session)


@app.get("/api/sessions/{session_id}", response_model=SessionResponse, tags=["session"])
def get_session(session_id: str):
    return _view(_get_session(session_id))


@app.delete("/api/sessions/{session_id}", tags=["session"])
def delete_session(session_id: str):
    session = _get_session(session_id)
    if session.is_analyzing:
        raise HTTPException(status_code=409, detail="Analysis already in progress.")
    del sessions[session_id]
    return {"status": True, "session_id": session_id}


@app.post("/api/sessions/{session_id}/document", response_model=SessionResponse, tags=["session"])
async def upload_document(session_id: str, resume: UploadFile = File(...)):
    session = _get_session(session_id)
    try:
        document = await _read_document(resume)
    except ResumeAIError as e:
        sessions[session_id] = set_error(session, e.message)
        raise

    sessions[session_id] = select_file(sessions[session_id], document)
    logger.info(f"Session {session_id}: selected {document.mime_type} ({document.size_bytes} bytes)")
    return _view(sessions[session_id])


@app.patch("/api/sessions/{session_id}/job", response_model=SessionResponse, tags=["session"])
def edit_job_details(session_id: str, update: JobDetailsUpdate):
    session = _get_session(session_id)
    for name, value in update.model_dump(exclude_none=True).items():
        session = update_job_details(session, name, value)
    sessions[session_id] = session
    return _view(session)


@app.post("/api/sessions/{session_id}/analyze", response_model=None, tags=["session"])
@rate_limit
async def analyze_session(request: Request, session_id: str):
    session = _get_session(session_id)
    if session.is_analyzing:
        raise HTTPException(status_code=409, detail="Analysis already in progress.")

    preview = session.document.preview if session.document else None
    try:
        validate_submission(session.job_details, preview)
    except ResumeAIError as e:
        sessions[session_id] = set_error(session, e.message)
        raise

    sessions[session_id] = begin_analysis(session)
    try:
        mime_type, base64_data = split_data_uri(preview)
        result = await analyze_resume(base64_data, mime_type, session.job_details)
    except ResumeAIError as e:
        sessions[session_id] = fail_analysis(sessions[session_id], e.message)
        raise
    except BaseException:
        # cancelled (client went away) or interrupted; never leave the session busy
        sessions[session_id] = fail_analysis(sessions[session_id], UnknownError().message)
        raise

    sessions[session_id] = complete_analysis(sessions[session_id], result)
    return result.model_dump(by_alias=True)


@app.get("/api/sessions/{session_id}/result", response_model=None, tags=["session"])
def session_result(session_id: str):
    session = _get_session(session_id)
    if session.result is None:
        raise HTTPException(status_code=404, detail="Result not found")
    return session.result.model_dump(by_alias=True)


@app.get("/api/sessions/{session_id}/report", response_class=HTMLResponse, tags=["session"])
def session_report(session_id: str):
    session = _get_session(session_id)
    if session.result is None:
        raise HTTPException(status_code=404, detail="Report not found")
    filename = session.document.file_name if session.document else None
    return HTMLResponse(render_dashboard(session.result, session.job_details, filename))


@app.get("/api/sessions/{session_id}/download", tags=["session"])
def download(session_id: str):
    session = _get_session(session_id)
    if session.result is None:
        raise HTTPException(status_code=404, detail="Report not found")

    filename = session.document.file_name if session.document else None
    pdf_bytes = build_pdf(session.result, session.job_details, filename)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="Resume_Analysis_{session_id}.pdf"'},
    )


@app.post("/api/sessions/{session_id}/reset", response_model=SessionResponse, tags=["session"])
def reset_session(session_id: str):
    session = _get_session(session_id)
    if session.is_analyzing:
        raise HTTPException(status_code=409, detail="Analysis already in progress.")
    sessions[session_id] = reset(session)
    return _view(sessions[session_id])


@app.post("/api/analyze", response_model=None, tags=["default"])
@rate_limit
async def analyze(
    request: Request,
    resume: UploadFile = File(...),
    title: str = Form(""),
    company: str = Form(""),
    description: str = Form(""),
    report: Optional[bool] = Form(False),
):
    document = await _read_document(resume)
    job = JobDetails(title=title, company=company, description=description)
    validate_submission(job, document.preview)

    mime_type, base64_data = split_data_uri(document.preview)
    result = await analyze_resume(base64_data, mime_type, job)

    if report:
        return HTMLResponse(render_dashboard(result, job, document.file_name))
    return result.model_dump(by_alias=True)
