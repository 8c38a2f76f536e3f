from __future__ import annotations
import argparse
import logging
import requests
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from jobboard import crud, models
from jobboard.config import Settings, load_settings
from jobboard.database import Base, build_engine, build_session_factory

LOGGER = logging.getLogger("jobboard.fetch_jobs")


def _headers(settings: Settings) -> dict:
    if settings.JOB_SEARCH_API_KEY:
        return {"x-api-key": settings.JOB_SEARCH_API_KEY}
    return {}


def _parse_list_date(value) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _text_contains_any(text: str, needles: list[str]) -> bool:
    tl = (text or "").lower()
    return any(n.lower() in tl for n in needles)


# ---------- Remote API ----------

def search_remote_jobs(settings: Settings, keyword: str | None) -> list[dict]:
    """GET the search endpoint; the API answers with a list or a {jobs|results: [...]} object."""
    if not settings.JOB_SEARCH_API_URL:
        raise RuntimeError("Set JOB_SEARCH_API_URL env var")

    r = requests.get(
        settings.JOB_SEARCH_API_URL,
        params={"keyword": keyword} if keyword else None,
        headers=_headers(settings),
        timeout=settings.JOB_SEARCH_TIMEOUT_SECONDS,
    )
    r.raise_for_status()
    data = r.json()
    if isinstance(data, dict):
        data = data.get("jobs") or data.get("results") or []
    return [j for j in data if isinstance(j, dict)]


def fetch_job_description(settings: Settings, url: str) -> str:
    if not settings.JOB_INFO_API_URL:
        raise RuntimeError("Set JOB_INFO_API_URL env var")

    r = requests.get(
        settings.JOB_INFO_API_URL,
        params={"query": url},
        headers=_headers(settings),
        timeout=settings.JOB_SEARCH_TIMEOUT_SECONDS,
    )
    r.raise_for_status()
    data = r.json()
    description = data.get("job_description") if isinstance(data, dict) else None
    return description if isinstance(description, str) else ""


# ---------- Mapping & filtering ----------

def _remote_text(j: dict, *keys: str) -> str | None:
    """First non-empty value among ``keys``, stripped; None when that value is not a string."""
    for key in keys:
        value = j.get(key)
        if value is None or value == "":
            continue
        return value.strip() if isinstance(value, str) else None
    return ""


def job_values_from_remote(j: dict) -> dict | None:
    """
    Map one remote job to Job column values. Rows without a title or url
    cannot be deduplicated or displayed and are skipped, as are rows whose
    text fields are not strings.
    """
    if not isinstance(j, dict):
        return None
    values = {
        "title": _remote_text(j, "title"),
        "url": _remote_text(j, "url"),
        "company": _remote_text(j, "company_name", "company"),
        "company_url": _remote_text(j, "company_url"),
        "location": _remote_text(j, "location"),
    }
    if any(value is None for value in values.values()):
        return None
    if not values["title"] or not values["url"]:
        return None

    values["description"] = ""  # filled lazily on first read
    posted_at = _parse_list_date(j.get("list_date"))
    if posted_at is not None:
        values["posted_at"] = posted_at
    return values


def _passes_local_filters(values: dict, location: str | None) -> bool:
    if location is None:
        return True
    return _text_contains_any(values["location"], [location])


# ---------- Main fetch/store ----------

def fetch_and_store_jobs(
    db: Session, settings: Settings, keyword: str | None = None, location: str | None = None
) -> list[models.Job]:
    """Fetch jobs for ``keyword`` and persist the ones whose url is not stored yet."""
    remote = search_remote_jobs(settings, keyword)

    saved: list[models.Job] = []
    for j in remote:
        values = job_values_from_remote(j)
        if values is None or not _passes_local_filters(values, location):
            continue
        job = crud.add_job_if_new(db, values)
        if job is not None:
            saved.append(job)
    crud.commit(db, f"fetch_and_store_jobs keyword={keyword!r}")

    LOGGER.info("saved %d new jobs (fetched %d) for keyword=%r", len(saved), len(remote), keyword)
    return saved


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Pull jobs from the external search API into the database.")
    parser.add_argument("keyword", nargs="?", default=None)
    parser.add_argument("--location", default=None)
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()
    try:
        saved = fetch_and_store_jobs(db, settings, args.keyword, args.location)
    except Exception:
        db.rollback()
        LOGGER.exception("fetch_and_store_jobs failed")
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"[ok] saved {len(saved)} jobs")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
