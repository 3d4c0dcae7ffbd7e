from resumeai.core import AnalysisResult, JobDetails
from resumeai.services.report import render_dashboard
from resumeai.services.report_pdf import build_pdf


def test_absent_result_renders_nothing():
    assert render_dashboard(None) == ""


def test_dashboard_shows_scores_and_lists(sample_result):
    result = AnalysisResult.model_validate(sample_result)
    html = render_dashboard(result, JobDetails(title="Backend Engineer", company="Acme"), "cv.pdf")

    assert "82%" in html
    assert "74%" in html
    assert "Backend Engineer at Acme" in html
    assert "cv.pdf" in html
    for line in sample_result["strengths"] + sample_result["weaknesses"]:
        assert f"<li>{line}</li>" in html
    for kw in ["gRPC", "Kubernetes", "Raft", "observability"]:
        assert kw in html
    assert "High impact" in html
    assert "<del class=\"orig\">recieved</del>" in html
    assert "<ins class=\"fix\">received</ins>" in html


def test_dashboard_escapes_model_text(sample_result):
    sample_result["summary"] = "<script>alert(1)</script>"
    html = render_dashboard(AnalysisResult.model_validate(sample_result))
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_dashboard_empty_sections(sample_result):
    sample_result["spellingErrors"] = []
    sample_result["improvements"] = []
    html = render_dashboard(AnalysisResult.model_validate(sample_result))
    assert "No issues found." in html


def test_build_pdf(sample_result):
    pdf = build_pdf(AnalysisResult.model_validate(sample_result), JobDetails(title="SRE & <Ops>"), "cv.pdf")
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 500
