import pytest
from django.contrib.auth import get_user_model
from django.utils.timezone import now
from rest_framework.test import APIClient

from Contribute.models import Contributor, Session


@pytest.fixture(autouse=True)
def inline_autosave(settings):
    settings.AUTOSAVE_DEBOUNCE_SECONDS = 0
    settings.GROQ_API_KEY = "test-key"
    settings.INTERVIEW_ORGANIZATION = "Mother"
    settings.INTERVIEW_PEER_NAMES = []
    settings.PUBLIC_BASE_URL = ""


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def algo_session(db):
    return Session.objects.create(
        name="Q1 Allocation",
        algorithm_text="score = 0.6 * interview + 0.4 * peers",
        collect_algorithm_feedback=True,
    )


@pytest.fixture
def bare_session(db):
    return Session.objects.create(name="No Algorithm")


@pytest.fixture
def contributor(db):
    return Contributor.objects.create(name="Ada")


@pytest.fixture
def reviewing_contributor(algo_session):
    return Contributor.objects.create(name="Grace", session=algo_session)


@pytest.fixture
def interviewing_contributor(db):
    return Contributor.objects.create(name="Linus", allocation_prefs_submitted_at=now())


@pytest.fixture
def fake_llm(monkeypatch):
    """Replace the Groq call with a recorder returning a canned reply."""
    calls = []

    def _fake(messages, model=None, max_completion_tokens=None):
        calls.append(messages)
        return "Thanks! What did you ship?", {"total_tokens": 10}

    monkeypatch.setattr("Interview.agents.interviewer_agent.generate_response_with_groq", _fake)
    return calls


@pytest.fixture
def failing_llm(monkeypatch):
    from Interview.utils import LLMError

    def _fail(messages, model=None, max_completion_tokens=None):
        raise LLMError("upstream unavailable")

    monkeypatch.setattr("Interview.agents.interviewer_agent.generate_response_with_groq", _fail)


@pytest.fixture
def admin_user(db):
    return get_user_model().objects.create_user(
        username="admin@example.com",
        email="admin@example.com",
        password="s3cret-pass",
        is_staff=True,
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_login(admin_user)
    return client
