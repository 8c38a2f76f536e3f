import pytest
from sqlalchemy.orm import Session

from jobboard import crud
from jobboard.crud import JobQuery


def _seed_job(db: Session, **overrides):
    values = {
        "title": "Engineer",
        "url": "https://example.com/job/1",
        "description": "Generic role",
        "company": "Acme",
        "company_url": "https://acme.example.com",
        "location": "Remote",
    }
    values.update(overrides)
    return crud.create_job(db, values)


def test_job_lifecycle(client, job_fields):
    r = client.post("/jobs", json=job_fields)
    assert r.status_code == 201, r.text
    assert r.json()["message"] == "Job created successfully."
    job = r.json()["job"]
    job_id = job["id"]
    assert job["companyURL"] == job_fields["companyURL"]
    assert job["postedAt"]

    r = client.get(f"/jobs/{job_id}")
    assert r.status_code == 200
    fetched = r.json()
    for field in ("title", "url", "description", "company", "companyURL", "location"):
        assert fetched[field] == job_fields[field]

    r = client.patch(f"/jobs/{job_id}", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "No update data provided."}

    r = client.patch(f"/jobs/{job_id}", json={"title": "Senior Software Engineer"})
    assert r.status_code == 200
    assert r.json()["message"] == "Job successfully updated."
    assert r.json()["updatedJob"]["title"] == "Senior Software Engineer"

    r = client.delete(f"/jobs/{job_id}")
    assert r.status_code == 200
    assert r.json() == {"message": "Job successfully deleted."}

    r = client.get(f"/jobs/{job_id}")
    assert r.status_code == 404
    assert r.json() == {"error": "Job not found."}


@pytest.mark.parametrize("missing", ["title", "url", "description", "company", "companyURL", "location"])
def test_create_job_requires_every_field(client, job_fields, missing):
    job_fields.pop(missing)
    r = client.post("/jobs", json=job_fields)
    assert r.status_code == 400
    assert r.json() == {
        "error": "Title, URL, description, company, companyURL and location are required."
    }


def test_create_job_with_explicit_posted_at(client, job_fields):
    job_fields["postedAt"] = "2024-05-01T12:00:00+00:00"
    r = client.post("/jobs", json=job_fields)
    assert r.status_code == 201
    assert r.json()["job"]["postedAt"].startswith("2024-05-01T12:00:00")


def test_invalid_job_ids(client):
    for method in ("get", "delete"):
        r = getattr(client, method)("/jobs/invalid")
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid job ID format."}
    r = client.patch("/jobs/invalid", json={"title": "X"})
    assert r.status_code == 400


def test_update_and_delete_missing_job(client):
    r = client.patch("/jobs/999999", json={"title": "Nonexistent"})
    assert r.status_code == 404
    assert r.json() == {"error": "Job not found."}

    r = client.delete("/jobs/999999")
    assert r.status_code == 404


def test_update_rejects_blank_values(client, create_job):
    job = create_job()
    r = client.patch(f"/jobs/{job['id']}", json={"title": "   "})
    assert r.status_code == 400


def test_list_jobs_filters(client, db_session):
    _seed_job(db_session, title="Python Developer", url="https://example.com/1", location="Berlin")
    _seed_job(db_session, title="Designer", description="Works with PYTHON devs", url="https://example.com/2", location="Remote")
    _seed_job(db_session, title="Accountant", company="Pythonic Ltd", url="https://example.com/3", location="Berlin")
    _seed_job(db_session, title="Chef", url="https://example.com/4", location="berlin")

    r = client.get("/jobs")
    assert r.status_code == 200
    assert len(r.json()) == 4

    # keyword: title OR description OR company, case-insensitive
    r = client.get("/jobs", params={"keyword": "python"})
    assert [j["url"] for j in r.json()] == [
        "https://example.com/1",
        "https://example.com/2",
        "https://example.com/3",
    ]

    # location is ANDed with the keyword
    r = client.get("/jobs", params={"keyword": "python", "location": "BERLIN"})
    assert [j["url"] for j in r.json()] == ["https://example.com/1", "https://example.com/3"]

    r = client.get("/jobs", params={"location": "berlin"})
    assert len(r.json()) == 3


def test_list_jobs_rejects_blank_filters(client):
    r = client.get("/jobs", params={"keyword": "   "})
    assert r.status_code == 400
    assert r.json() == {"error": "Keyword is required."}

    r = client.get("/jobs", params={"location": ""})
    assert r.status_code == 400
    assert r.json() == {"error": "Location is required."}


def test_job_query_escapes_like_wildcards(db_session):
    _seed_job(db_session, title="Engineer", url="https://example.com/a")
    _seed_job(db_session, title="100% Remote Engineer", url="https://example.com/b")

    assert [j.url for j in crud.search_jobs(db_session, JobQuery(keyword="%"))] == ["https://example.com/b"]
    assert crud.search_jobs(db_session, JobQuery(keyword="_")) == []
    assert len(crud.search_jobs(db_session, JobQuery())) == 2


def test_deleting_job_removes_its_applications(client, signup, create_job):
    _, headers = signup()
    job = create_job()
    application = client.post("/applications", json={"jobId": job["id"]}, headers=headers).json()["application"]

    assert client.delete(f"/jobs/{job['id']}").status_code == 200
    assert client.get(f"/applications/{application['id']}").status_code == 404
