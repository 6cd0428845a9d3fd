"""Pytest configuration and fixtures."""

import io
import json
from types import SimpleNamespace
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from app.cv_extractor.main import app
from app.cv_extractor.services.ai import AIService
from app.cv_extractor.services.cv_service import CVService, get_cv_service
from app.cv_extractor.services.payload_service import PayloadService


class FakeCompletions:
    """
    Records chat.completions.parse calls and replays a canned response.

    Like the SDK helper, non-empty content without a refusal is validated
    against the requested response_format.
    """

    def __init__(
        self,
        content: str | None = None,
        error: Exception | None = None,
        refusal: str | None = None,
    ):
        self.content = content
        self.error = error
        self.refusal = refusal
        self.calls: list[dict[str, Any]] = []

    def parse(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        parsed = None
        if self.content and not self.refusal:
            parsed = kwargs["response_format"].model_validate_json(self.content)
        message = SimpleNamespace(
            content=self.content, refusal=self.refusal, parsed=parsed
        )
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Minimal stand-in for openai.OpenAI."""

    def __init__(
        self,
        content: str | None = None,
        error: Exception | None = None,
        refusal: str | None = None,
    ):
        self.completions = FakeCompletions(content, error, refusal)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self.completions.calls


@pytest.fixture
def profile_data() -> dict[str, Any]:
    """Model response for the Jane Doe scenario."""
    return {
        "fullName": "Jane Doe",
        "age": 29,
        "driversLicense": True,
        "ownTransport": True,
        "noticePeriod": "2 weeks",
        "salaryRequirement": "Not specified",
        "workHistory": [
            {
                "company": "Acme",
                "position": "Analyst",
                "duration": "Jan 2020 – Present",
                "reasonForLeaving": "Not specified",
            }
        ],
        "qualifications": [
            {"institution": "State U", "course": "BSc", "year": "2016-2019"}
        ],
    }


@pytest.fixture
def openai_factory() -> type[FakeOpenAI]:
    """Build fake OpenAI clients with a given response or error."""
    return FakeOpenAI


@pytest.fixture
def fake_openai(profile_data: dict[str, Any]) -> FakeOpenAI:
    """Fake OpenAI client returning the Jane Doe profile."""
    return FakeOpenAI(content=json.dumps(profile_data))


@pytest.fixture
def ai_service(fake_openai: FakeOpenAI) -> AIService:
    """AI service wired to the fake client."""
    return AIService(api_key="test-key", model="gpt-4.1", client=fake_openai)


@pytest.fixture
def cv_service(ai_service: AIService) -> CVService:
    """Extraction pipeline wired to the fake client, 15 MiB ceiling."""
    return CVService(
        ai_service=ai_service,
        payload_service=PayloadService(),
        max_upload_bytes=15 * 1024 * 1024,
    )


@pytest.fixture
def client(cv_service: CVService) -> Generator[TestClient, None, None]:
    """Create a test client whose extraction pipeline uses the fake model."""
    app.dependency_overrides[get_cv_service] = lambda: cv_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Create a minimal valid PDF for testing."""
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>
endobj
trailer
<< /Size 4 /Root 1 0 R >>
%%EOF"""


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    """JPEG-looking bytes covering every byte value."""
    return b"\xff\xd8\xff\xe0" + bytes(range(256)) * 4 + b"\xff\xd9"


@pytest.fixture
def sample_docx_bytes() -> bytes:
    """Build a small DOCX CV with a paragraph, a table and another paragraph."""
    from docx import Document

    document = Document()
    document.add_heading("Jane Doe", level=1)
    document.add_paragraph("D.O.B: 12 March 1996")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Acme"
    table.cell(0, 1).text = "Analyst"
    table.cell(1, 0).text = "Jan 2020 – Present"
    table.cell(1, 1).text = "Current role"
    document.add_paragraph("Driver's license: Yes")

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
