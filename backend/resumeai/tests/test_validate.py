import pytest

from resumeai.core import JobDetails, MAX_FILE_BYTES
from resumeai.errors import ValidationError
from resumeai.services.validate import validate_file, validate_submission

PREVIEW = "data:application/pdf;base64,JVBERi0xLjQ="


@pytest.mark.parametrize("mime", ["application/pdf", "image/png", "image/jpeg", "image/webp"])
def test_allowed_types_pass(mime):
    validate_file(5 * 1024 * 1024, mime)


def test_exactly_at_limit_passes():
    validate_file(MAX_FILE_BYTES, "application/pdf")


@pytest.mark.parametrize("size", [MAX_FILE_BYTES + 1, 150 * 1024 * 1024])
def test_oversized_file_rejected(size):
    with pytest.raises(ValidationError) as exc:
        validate_file(size, "image/png")
    assert "100MB" in exc.value.message


@pytest.mark.parametrize(
    "mime",
    ["application/vnd.openxmlformats-officedocument.wordprocessingml.document", "image/gif", "text/plain", "", None],
)
def test_unsupported_type_rejected(mime):
    with pytest.raises(ValidationError) as exc:
        validate_file(1024, mime)
    assert exc.value.message == "Please upload a PDF or an image file."


def test_size_checked_before_type():
    with pytest.raises(ValidationError) as exc:
        validate_file(MAX_FILE_BYTES + 1, "text/plain")
    assert "100MB" in exc.value.message


def test_complete_submission_passes():
    validate_submission(JobDetails(title="Backend Engineer", description="Go"), PREVIEW)


@pytest.mark.parametrize(
    "job, preview",
    [
        (JobDetails(title="", description="Go"), PREVIEW),
        (JobDetails(title="Backend Engineer", description="   "), PREVIEW),
        (JobDetails(title="Backend Engineer", description="Go"), None),
        (JobDetails(title="Backend Engineer", description="Go"), ""),
    ],
)
def test_incomplete_submission_rejected(job, preview):
    with pytest.raises(ValidationError) as exc:
        validate_submission(job, preview)
    assert exc.value.message == "Please complete all steps before analyzing."


def test_company_is_optional():
    validate_submission(JobDetails(title="Backend Engineer", company="", description="Go"), PREVIEW)
