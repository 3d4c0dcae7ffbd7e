from __future__ import annotations

import base64
import binascii
import textwrap
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from resumeai.core import PLACEHOLDER_API_KEY, AnalysisResult, JobDetails, gemini_api_key, gemini_model
from resumeai.errors import (
    ConfigurationError,
    EmptyResponseError,
    EncodingError,
    MalformedResponseError,
    RejectedRequestError,
    ResumeAIError,
    UnknownError,
)

COMPANY_FALLBACK = "the target company"

# substrings in a remote error that mean the document itself was refused
_REJECTION_MARKERS = ("400", "INVALID_ARGUMENT")
# bad request, payload too large
REJECTION_CODES = (400, 413)

_OUTPUT_FORMAT = textwrap.dedent(
    """
    {
      "overallScore": number (0-100),
      "summary": string,
      "strengths": string[],
      "weaknesses": string[],
      "improvements": [{"category": string, "description": string, "impact": "High" | "Medium" | "Low"}],
      "spellingErrors": [{"original": string, "suggestion": string, "context": string}],
      "jobAlignment": {
        "matchPercentage": number (0-100),
        "missingKeywords": string[],
        "suggestedKeywords": string[],
        "roleFitSummary": string
      }
    }
    """
).strip()


def _string_list() -> types.Schema:
    return types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING))


def _object(properties: dict, required: list) -> types.Schema:
    return types.Schema(type=types.Type.OBJECT, properties=properties, required=required)


RESPONSE_SCHEMA = _object(
    {
        "overallScore": types.Schema(type=types.Type.INTEGER),
        "summary": types.Schema(type=types.Type.STRING),
        "strengths": _string_list(),
        "weaknesses": _string_list(),
        "improvements": types.Schema(
            type=types.Type.ARRAY,
            items=_object(
                {
                    "category": types.Schema(type=types.Type.STRING),
                    "description": types.Schema(type=types.Type.STRING),
                    "impact": types.Schema(type=types.Type.STRING, enum=["High", "Medium", "Low"]),
                },
                ["category", "description", "impact"],
            ),
        ),
        "spellingErrors": types.Schema(
            type=types.Type.ARRAY,
            items=_object(
                {
                    "original": types.Schema(type=types.Type.STRING),
                    "suggestion": types.Schema(type=types.Type.STRING),
                    "context": types.Schema(type=types.Type.STRING),
                },
                ["original", "suggestion", "context"],
            ),
        ),
        "jobAlignment": _object(
            {
                "matchPercentage": types.Schema(type=types.Type.INTEGER),
                "missingKeywords": _string_list(),
                "suggestedKeywords": _string_list(),
                "roleFitSummary": types.Schema(type=types.Type.STRING),
            },
            ["matchPercentage", "missingKeywords", "suggestedKeywords", "roleFitSummary"],
        ),
    },
    ["overallScore", "summary", "strengths", "weaknesses", "improvements", "spellingErrors", "jobAlignment"],
)


def get_ai_client() -> genai.Client:
    api_key = gemini_api_key()
    if not api_key or api_key == PLACEHOLDER_API_KEY:
        raise ConfigurationError()
    return genai.Client(api_key=api_key)


def build_prompt(mime_type: str, job: JobDetails) -> str:
    kind = "PDF" if mime_type == "application/pdf" else "Image"
    company = job.company.strip() or COMPANY_FALLBACK
    return (
        f"Analyze the attached resume ({kind})\n"
        f'specifically for the "{job.title}" role at "{company}".\n\n'
        f"Context Job Description:\n{job.description}\n\n"
        f"Required Output JSON format:\n{_OUTPUT_FORMAT}"
    )


def parse_analysis(text: Optional[str]) -> AnalysisResult:
    """Decode the model's reply. The declared schema is not trusted.

    Strict mode: "82" or true for a score is a shape error, not a coercion.
    """
    if not text or not text.strip():
        raise EmptyResponseError()
    try:
        return AnalysisResult.model_validate_json(text, strict=True)
    except PydanticValidationError as e:
        logger.error(f"Model reply failed validation ({e.error_count()} errors)")
        raise MalformedResponseError() from e


def map_analysis_error(exc: BaseException) -> ResumeAIError:
    """
    Translate a transport or SDK failure into the message the user sees.

    The substring checks are a heuristic over the upstream wording; a
    structured status code is used first when the SDK provides one.
    """
    if isinstance(exc, ResumeAIError):
        return exc

    if isinstance(exc, genai_errors.APIError) and exc.code in REJECTION_CODES:
        return RejectedRequestError()

    message = str(exc)
    if any(m in message for m in _REJECTION_MARKERS) or "too large" in message.lower():
        return RejectedRequestError()

    return UnknownError(message or None)


def _decode_document(document_base64: str) -> bytes:
    try:
        data = base64.b64decode(document_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError() from e
    if not data:
        raise EncodingError()
    return data


async def analyze_resume(document_base64: str, mime_type: str, job_details: JobDetails) -> AnalysisResult:
    """
    Send one resume plus job context to Gemini and return the decoded result.

    Exactly one request is made. Every failure leaves as a ResumeAIError.
    """
    client = get_ai_client()
    model_name = gemini_model()
    document = _decode_document(document_base64)
    prompt = build_prompt(mime_type, job_details)

    logger.info(f"Requesting analysis from {model_name} ({mime_type}, {len(document)} bytes)")

    try:
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=[types.Part.from_bytes(data=document, mime_type=mime_type), prompt],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        result = parse_analysis(response.text)
    except ResumeAIError as e:
        logger.error(f"Analysis reply rejected: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Gemini API error: {e}")
        raise map_analysis_error(e) from e

    logger.info(f"Analysis complete: score={result.overall_score}, match={result.job_alignment.match_percentage}")
    return result
