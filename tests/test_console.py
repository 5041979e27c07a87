import pytest
from django.db.models import ProtectedError
from django.urls import reverse
from django.utils.timezone import now

from Contribute.models import Contributor, Session
from Interview.models import Message


@pytest.mark.django_db
@pytest.mark.parametrize("name", ["console-dashboard", "sessions-list", "contributors-list"])
def test_anonymous_access_redirects_to_login(api_client, name):
    res = api_client.get(reverse(name))
    assert res.status_code == 302
    assert res["Location"] == reverse("console-login")


@pytest.mark.django_db
def test_non_staff_user_is_not_an_admin(api_client, django_user_model):
    user = django_user_model.objects.create_user(username="someone", password="pw")
    api_client.force_login(user)
    assert api_client.get(reverse("console-dashboard")).status_code == 302


@pytest.mark.django_db
def test_login_and_logout(api_client, admin_user):
    res = api_client.post(reverse("console-login"), {"email": "admin@example.com", "password": "wrong"}, format="json")
    assert res.status_code == 401

    res = api_client.post(reverse("console-login"), {"email": "admin@example.com", "password": "s3cret-pass"}, format="json")
    assert res.status_code == 200
    assert res.json()["body"]["email"] == "admin@example.com"
    assert api_client.get(reverse("console-dashboard")).status_code == 200

    res = api_client.get(reverse("console-login"))
    assert res.status_code == 302
    assert res["Location"] == reverse("console-dashboard")

    api_client.post(reverse("console-logout"))
    assert api_client.get(reverse("console-dashboard")).status_code == 302


@pytest.mark.django_db
def test_create_and_edit_session(admin_client):
    res = admin_client.post(reverse("sessions-list"), {
        "name": "  Q2  ",
        "algorithm_text": "   ",
        "collect_algorithm_feedback": True,
    }, format="json")
    assert res.status_code == 201
    session = Session.objects.get(id=res.json()["id"])
    assert session.name == "Q2"
    assert session.algorithm_text is None

    res = admin_client.patch(reverse("sessions-detail", args=[session.id]), {"algorithm_text": "rank by impact"}, format="json")
    assert res.status_code == 200
    assert res.json()["has_algorithm"] is True


@pytest.mark.django_db
def test_sessions_cannot_be_deleted(admin_client, reviewing_contributor):
    algo_session = reviewing_contributor.session
    res = admin_client.delete(reverse("sessions-detail", args=[algo_session.id]))
    assert res.status_code == 405
    assert Session.objects.filter(id=algo_session.id).exists()
    reviewing_contributor.refresh_from_db()
    assert reviewing_contributor.session_id == algo_session.id


@pytest.mark.django_db
def test_session_requires_name(admin_client):
    res = admin_client.post(reverse("sessions-list"), {"name": " "}, format="json")
    assert res.status_code == 400


@pytest.mark.django_db
def test_create_contributor_generates_token_and_link(admin_client, algo_session):
    res = admin_client.post(reverse("contributors-list"), {"name": "Zina", "session": algo_session.id}, format="json")
    assert res.status_code == 201
    body = res.json()["body"]
    contributor = Contributor.objects.get(id=body["id"])
    assert contributor.session == algo_session
    assert len(contributor.token) >= 24
    assert body["access_link"].endswith(reverse("character-access", kwargs={"token": contributor.token}))
    assert body["status"] == "Not Started"


@pytest.mark.django_db
def test_create_contributor_without_session(admin_client):
    res = admin_client.post(reverse("contributors-list"), {"name": "Solo"}, format="json")
    assert res.status_code == 201
    assert Contributor.objects.get(name="Solo").session is None


@pytest.mark.django_db
def test_tokens_are_unique(admin_client):
    for i in range(20):
        admin_client.post(reverse("contributors-list"), {"name": f"c{i}"}, format="json")
    tokens = list(Contributor.objects.values_list("token", flat=True))
    assert len(set(tokens)) == len(tokens) == 20


@pytest.mark.django_db
def test_list_filters_by_session_and_derives_status(admin_client, algo_session, bare_session):
    Contributor.objects.create(name="A", session=algo_session, interview_completed=True)
    Contributor.objects.create(name="B", session=algo_session, allocation_prefs_submitted_at=now())
    Contributor.objects.create(name="C", session=bare_session)

    res = admin_client.get(reverse("contributors-list"), {"session": algo_session.id})
    rows = {r["name"]: r["status"] for r in res.json()}
    assert rows == {"A": "Completed", "B": "In Interview"}

    assert len(admin_client.get(reverse("contributors-list")).json()) == 3


@pytest.mark.django_db
def test_dashboard_summarizes_selected_session(admin_client, algo_session):
    Contributor.objects.create(name="A", session=algo_session, algorithm_acknowledged_at=now())
    Contributor.objects.create(name="B")

    body = admin_client.get(reverse("console-dashboard"), {"session": algo_session.id}).json()["body"]
    assert body["selected_session"]["name"] == algo_session.name
    assert body["contributor_count"] == 1
    assert body["status_counts"] == {"Filling Prefs": 1}
    assert body["can_add_contributor"] is True

    body = admin_client.get(reverse("console-dashboard")).json()["body"]
    assert body["contributor_count"] == 2
    assert body["can_add_contributor"] is False


@pytest.mark.django_db
def test_transcript_is_read_only_and_ordered(admin_client, interviewing_contributor):
    Message.objects.create(contributor=interviewing_contributor, role="assistant", content="Hi")
    Message.objects.create(contributor=interviewing_contributor, role="user", content="Hello")
    Message.objects.create(contributor=interviewing_contributor, role="user", content="Hello")

    res = admin_client.get(reverse("contributors-transcript", args=[interviewing_contributor.id]))
    assert res.status_code == 200
    assert [m["content"] for m in res.json()["messages"]] == ["Hi", "Hello", "Hello"]
    assert admin_client.post(reverse("contributors-transcript", args=[interviewing_contributor.id])).status_code == 405


@pytest.mark.django_db
def test_delete_contributor_removes_messages_first(admin_client, interviewing_contributor):
    Message.objects.create(contributor=interviewing_contributor, role="assistant", content="Hi")
    Message.objects.create(contributor=interviewing_contributor, role="user", content="Hello")

    res = admin_client.delete(reverse("contributors-detail", args=[interviewing_contributor.id]))
    assert res.status_code == 200
    assert res.json()["body"]["deleted_messages"] == 2
    assert not Contributor.objects.filter(id=interviewing_contributor.id).exists()
    assert not Message.objects.filter(contributor_id=interviewing_contributor.id).exists()
    assert admin_client.get(reverse("contributors-detail", args=[interviewing_contributor.id])).status_code == 404


@pytest.mark.django_db
def test_contributor_row_is_protected_while_messages_remain(interviewing_contributor):
    Message.objects.create(contributor=interviewing_contributor, role="user", content="Hello")
    with pytest.raises(ProtectedError):
        interviewing_contributor.delete()
