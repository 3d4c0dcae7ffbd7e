import pytest

from resumeai.core import AnalysisResult
from resumeai.models import UploadedDocument
from resumeai.services import session as s

DOC = UploadedDocument(file_name="cv.pdf", mime_type="application/pdf", size_bytes=8, preview="data:application/pdf;base64,JVBERi0xLjQ=")


def test_new_session_is_empty():
    st = s.new_session()
    assert st.session_id
    assert st.document is None
    assert st.result is None
    assert st.error is None
    assert st.is_analyzing is False


def test_select_file_replaces_document_and_clears_error():
    st = s.set_error(s.new_session(), "File size exceeds 100MB limit.")
    other = UploadedDocument(file_name="cv.png", mime_type="image/png", size_bytes=4, preview="data:image/png;base64,AAAA")

    st = s.select_file(s.select_file(st, DOC), other)
    assert st.document == other
    assert st.error is None


def test_rejected_selection_keeps_previous_document():
    st = s.set_error(s.select_file(s.new_session(), DOC), "Please upload a PDF or an image file.")
    assert st.document == DOC
    assert st.error == "Please upload a PDF or an image file."


def test_transitions_do_not_mutate_input():
    before = s.new_session()
    after = s.update_job_details(before, "title", "Backend Engineer")
    assert before.job_details.title == ""
    assert after.job_details.title == "Backend Engineer"


def test_unknown_job_field_rejected():
    with pytest.raises(ValueError):
        s.update_job_details(s.new_session(), "salary", "lots")


def test_analysis_lifecycle(sample_result):
    result = AnalysisResult.model_validate(sample_result)

    st = s.begin_analysis(s.set_error(s.select_file(s.new_session(), DOC), "old"))
    assert st.is_analyzing is True
    assert st.error is None

    done = s.complete_analysis(st, result)
    assert done.is_analyzing is False
    assert done.result == result

    failed = s.fail_analysis(st, "Failed to analyze document.")
    assert failed.is_analyzing is False
    assert failed.result is None
    assert failed.error == "Failed to analyze document."


def test_reset_clears_document_result_and_error(sample_result):
    st = s.select_file(s.new_session(), DOC)
    st = s.update_job_details(st, "title", "Backend Engineer")
    st = s.complete_analysis(s.begin_analysis(st), AnalysisResult.model_validate(sample_result))

    cleared = s.reset(s.set_error(st, "boom"))
    assert cleared.document is None
    assert cleared.result is None
    assert cleared.error is None
    assert cleared.is_analyzing is False
    assert cleared.session_id == st.session_id
    assert cleared.job_details.title == "Backend Engineer"


def test_completed_analysis_drops_encoded_file(sample_result):
    st = s.begin_analysis(s.select_file(s.new_session(), DOC))
    done = s.complete_analysis(st, AnalysisResult.model_validate(sample_result))
    assert done.document.preview is None
    assert done.document.file_name == "cv.pdf"
    assert done.document.size_bytes == DOC.size_bytes


def test_expiry():
    st = s.new_session()
    assert not s.is_expired(st, st.created_at + 10, ttl_seconds=60)
    assert s.is_expired(st, st.created_at + 61, ttl_seconds=60)
    assert not s.is_expired(s.begin_analysis(st), st.created_at + 61, ttl_seconds=60)
