import pytest
import requests
from sqlalchemy.exc import OperationalError
from fastapi.testclient import TestClient

from jobboard import crud
from jobboard.jobs import fetch_jobs as fj
from jobboard.main import create_app
from jobboard.services import jobs as jobs_service

SEARCH_URL = "https://jobs.example.com/search"
INFO_URL = "https://jobs.example.com/info"

REMOTE_JOBS = [
    {
        "title": "Python Developer",
        "url": "https://jobs.example.com/1",
        "company_name": "Snake Corp",
        "company_url": "https://snake.example.com",
        "location": "Berlin, Germany",
        "list_date": "2024-03-01T09:00:00Z",
    },
    {
        "title": "Python Engineer",
        "url": "https://jobs.example.com/2",
        "company_name": "Remote Co",
        "company_url": "https://remote.example.com",
        "location": "Remote",
        "list_date": "not a date",
    },
    # unusable rows
    {"title": "", "url": "https://jobs.example.com/3"},
    {"title": "No url"},
]


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture()
def fake_api(monkeypatch):
    """Route requests.get to canned search/info payloads and record the calls."""
    calls = []
    state = {"search": REMOTE_JOBS, "info": {"job_description": "Fetched description"}, "fail": False}

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if state["fail"]:
            raise requests.ConnectionError("api down")
        if url == SEARCH_URL:
            return FakeResponse(state["search"])
        return FakeResponse(state["info"])

    monkeypatch.setattr(fj.requests, "get", fake_get)
    state["calls"] = calls
    return state


@pytest.fixture()
def api_settings(settings_with):
    return settings_with(
        JOB_SEARCH_API_URL=SEARCH_URL,
        JOB_INFO_API_URL=INFO_URL,
        JOB_SEARCH_API_KEY="key-123",
        JOB_SEARCH_TIMEOUT_SECONDS=3,
    )


def test_job_values_from_remote_mapping():
    values = fj.job_values_from_remote(REMOTE_JOBS[0])
    assert values["title"] == "Python Developer"
    assert values["company"] == "Snake Corp"
    assert values["company_url"] == "https://snake.example.com"
    assert values["description"] == ""
    assert values["posted_at"].year == 2024

    # unparseable date falls back to the column default
    assert "posted_at" not in fj.job_values_from_remote(REMOTE_JOBS[1])
    assert fj.job_values_from_remote(REMOTE_JOBS[2]) is None
    assert fj.job_values_from_remote(REMOTE_JOBS[3]) is None


def test_search_accepts_wrapped_payload(fake_api, api_settings):
    fake_api["search"] = {"jobs": REMOTE_JOBS[:1]}
    assert fj.search_remote_jobs(api_settings, "python") == REMOTE_JOBS[:1]

    call = fake_api["calls"][-1]
    assert call["params"] == {"keyword": "python"}
    assert call["headers"] == {"x-api-key": "key-123"}
    assert call["timeout"] == 3


def test_fetch_and_store_dedupes_by_url(fake_api, api_settings, db_session):
    saved = fj.fetch_and_store_jobs(db_session, api_settings, "python")
    assert [j.url for j in saved] == ["https://jobs.example.com/1", "https://jobs.example.com/2"]

    # second run finds nothing new
    assert fj.fetch_and_store_jobs(db_session, api_settings, "python") == []
    assert len(crud.search_jobs(db_session, crud.JobQuery())) == 2


def test_fetch_and_store_applies_location_filter(fake_api, api_settings, db_session):
    saved = fj.fetch_and_store_jobs(db_session, api_settings, "python", location="berlin")
    assert [j.url for j in saved] == ["https://jobs.example.com/1"]


def test_search_requires_configuration(settings):
    with pytest.raises(RuntimeError):
        fj.search_remote_jobs(settings, "python")


def test_list_jobs_falls_back_to_remote_search(fake_api, api_settings, db_session):
    jobs = jobs_service.list_jobs(db_session, api_settings, keyword="python", location="remote")
    assert [j.url for j in jobs] == ["https://jobs.example.com/2"]
    assert len(fake_api["calls"]) == 1

    # stored now, so no second remote call
    jobs = jobs_service.list_jobs(db_session, api_settings, keyword="python", location="remote")
    assert len(jobs) == 1
    assert len(fake_api["calls"]) == 1


def test_list_jobs_without_filters_never_calls_remote(fake_api, api_settings, db_session):
    assert jobs_service.list_jobs(db_session, api_settings) == []
    assert fake_api["calls"] == []


def test_list_jobs_survives_remote_failure(fake_api, api_settings, db_session):
    fake_api["fail"] = True
    assert jobs_service.list_jobs(db_session, api_settings, keyword="python") == []


def test_get_job_backfills_empty_description(fake_api, api_settings, db_session):
    fj.fetch_and_store_jobs(db_session, api_settings, "python")
    stored = crud.get_job_by_url(db_session, "https://jobs.example.com/1")
    assert stored.description == ""

    job = jobs_service.get_job(db_session, api_settings, stored.id)
    assert job.description == "Fetched description"
    assert fake_api["calls"][-1]["params"] == {"query": "https://jobs.example.com/1"}


def test_get_job_backfill_failure_is_ignored(fake_api, api_settings, db_session):
    fj.fetch_and_store_jobs(db_session, api_settings, "python")
    stored = crud.get_job_by_url(db_session, "https://jobs.example.com/2")

    fake_api["fail"] = True
    job = jobs_service.get_job(db_session, api_settings, stored.id)
    assert job.description == ""


def test_rest_search_uses_enrichment(fake_api, api_settings, db_session):
    with TestClient(create_app(api_settings)) as client:
        r = client.get("/jobs", params={"keyword": "engineer"})
        assert r.status_code == 200
        assert [j["url"] for j in r.json()] == ["https://jobs.example.com/2"]


@pytest.mark.parametrize(
    "row",
    [
        {"title": 123, "url": "https://jobs.example.com/9"},
        {"title": "Python Developer", "url": ["https://jobs.example.com/9"]},
        {"title": "Python Developer", "url": "https://jobs.example.com/9", "company_name": {"n": 1}},
        {"title": "Python Developer", "url": "https://jobs.example.com/9", "company_url": 42},
        {"title": "Python Developer", "url": "https://jobs.example.com/9", "location": ["Berlin"]},
        "not an object",
    ],
)
def test_job_values_from_remote_skips_badly_typed_rows(row):
    assert fj.job_values_from_remote(row) is None


def test_badly_typed_rows_are_skipped_but_good_ones_stored(fake_api, api_settings, db_session):
    fake_api["search"] = [
        {"title": 123, "url": "https://jobs.example.com/bad-title"},
        {"title": "Python Dev", "url": "https://jobs.example.com/bad-company", "company": {"n": 1}},
        REMOTE_JOBS[0],
    ]
    saved = fj.fetch_and_store_jobs(db_session, api_settings, "python")
    assert [j.url for j in saved] == ["https://jobs.example.com/1"]


@pytest.mark.parametrize(
    "payload",
    [
        [{"title": 123, "url": "https://jobs.example.com/9"}],
        [{"title": "Python Developer", "url": "https://jobs.example.com/9", "company": {"n": 1}}],
    ],
)
def test_rest_search_survives_malformed_remote_rows(fake_api, api_settings, payload):
    fake_api["search"] = payload
    with TestClient(create_app(api_settings)) as client:
        r = client.get("/jobs", params={"keyword": "python"})
        assert r.status_code == 200
        assert r.json() == []


def test_list_jobs_survives_store_failure_during_enrichment(fake_api, api_settings, db_session, monkeypatch):
    def broken_add(db, values):
        raise OperationalError("INSERT INTO jobs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(fj.crud, "add_job_if_new", broken_add)
    assert jobs_service.list_jobs(db_session, api_settings, keyword="python") == []
    assert len(fake_api["calls"]) == 1
