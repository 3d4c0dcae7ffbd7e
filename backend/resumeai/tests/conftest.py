from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from resumeai import ai
from resumeai.main import app, sessions


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client(anyio_backend):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture(autouse=True)
def clear_sessions():
    sessions.clear()
    yield
    sessions.clear()


@pytest.fixture
def sample_result():
    return {
        "overallScore": 82,
        "summary": "Solid backend profile with clear distributed systems exposure.",
        "strengths": ["Five years of Go in production", "Led a Kafka migration"],
        "weaknesses": ["No quantified impact on recent role", "Summary section is generic"],
        "improvements": [
            {"category": "Impact", "description": "Add metrics to the last two roles.", "impact": "High"},
            {"category": "Formatting", "description": "Use a single column layout.", "impact": "Low"},
        ],
        "spellingErrors": [
            {"original": "recieved", "suggestion": "received", "context": "recieved an award for uptime"},
        ],
        "jobAlignment": {
            "matchPercentage": 74,
            "missingKeywords": ["gRPC", "Kubernetes"],
            "suggestedKeywords": ["Raft", "observability"],
            "roleFitSummary": "Strong fit for the core services team.",
        },
    }


class FakeModels:
    def __init__(self):
        self.text = None
        self.exc = None
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(text=self.text)


@pytest.fixture
def fake_gemini(monkeypatch):
    """Stand-in for the Gemini client; set .text or .exc before calling."""
    models = FakeModels()
    monkeypatch.setattr(ai, "get_ai_client", lambda: SimpleNamespace(aio=SimpleNamespace(models=models)))
    return models
