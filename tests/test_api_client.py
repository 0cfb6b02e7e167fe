import pytest
import requests
from unittest.mock import MagicMock

from api_client import CHUNK_SIZE, SessionClient, SessionNotStartedError, chunk_records
from conftest import make_response
from models import JobRecord

API = "http://api.test"
RUNS_URL = f"{API}/api/jobs/scraping-runs"


def _records(count: int):
    return [
        JobRecord(
            job_title=f"Job {i}",
            business="Prairie Farms Ltd",
            location="Regina, Saskatchewan",
            job_url=f"https://www.jobbank.gc.ca/jobsearch/jobpostingtfw/{40000000 + i}",
            job_bank_id=str(40000000 + i),
        )
        for i in range(count)
    ]


class FakeBackend:
    """Routes session.post calls and records each request body."""

    def __init__(self, fail_on_chunk: int = None, error: Exception = None):
        self.fail_on_chunk = fail_on_chunk
        self.error = error or requests.HTTPError("500 Server Error")
        self.chunks = []
        self.completed = []

    def post(self, url, json=None, timeout=None):
        if url == RUNS_URL:
            return make_response({
                "id": "run-123",
                "status": "running",
                "started_at": "2025-03-04T05:06:07Z",
                "total_pages": 0,
                "jobs_scraped": 0,
                "jobs_stored": 0,
                "last_page_scraped": 0,
                "created_at": "2025-03-04T05:06:07Z",
            })
        if url.endswith("/jobs"):
            self.chunks.append(json)
            if self.fail_on_chunk == len(self.chunks):
                raise self.error
            return make_response({"jobs_processed": len(json), "scraping_run_id": "run-123"})
        if url.endswith("/complete"):
            self.completed.append(json)
            return make_response({"message": "Scraping run completed successfully"})
        raise AssertionError(f"unexpected POST {url}")


def _client(backend: FakeBackend = None):
    session = MagicMock()
    backend = backend or FakeBackend()
    session.post.side_effect = backend.post
    return SessionClient(API + "/", timeout=5, session=session), session, backend


def test_chunk_records_arithmetic():
    records = _records(1250)

    chunks = chunk_records(records)

    assert [len(chunk) for chunk in chunks] == [500, 500, 250]
    assert [job for chunk in chunks for job in chunk] == records
    assert chunk_records([]) == []
    assert len(chunk_records(_records(500))) == 1
    assert len(chunk_records(_records(501))) == 2


def test_chunk_records_rejects_non_positive_size():
    with pytest.raises(ValueError):
        chunk_records(_records(3), size=0)


def test_test_connection_success():
    client, session, _ = _client()
    session.get.return_value = make_response({"total_jobs": 10})

    assert client.test_connection() is True
    session.get.assert_called_once_with(f"{API}/api/jobs/stats", timeout=5)


def test_test_connection_reports_failure_instead_of_raising():
    client, session, _ = _client()
    session.get.side_effect = requests.ConnectionError("refused")
    assert client.test_connection() is False

    session.get.side_effect = None
    session.get.return_value = make_response(error=requests.HTTPError("503"))
    assert client.test_connection() is False


def test_start_scraping_session_keeps_run_id():
    client, session, _ = _client()

    run_id = client.start_scraping_session()

    assert run_id == "run-123"
    assert client.scraping_run_id == "run-123"
    session.post.assert_called_once_with(RUNS_URL, json=None, timeout=5)


def test_start_scraping_session_propagates_errors():
    client, session, _ = _client()
    error = requests.ConnectionError("down")
    session.post.side_effect = error

    with pytest.raises(requests.ConnectionError) as exc_info:
        client.start_scraping_session()

    assert exc_info.value is error
    assert client.scraping_run_id is None


def test_submit_requires_started_session():
    client, session, _ = _client()

    with pytest.raises(SessionNotStartedError):
        client.submit_jobs(_records(1))
    session.post.assert_not_called()


def test_complete_requires_started_session():
    client, session, _ = _client()

    with pytest.raises(SessionNotStartedError):
        client.complete_scraping_session(1, 0, 0)
    session.post.assert_not_called()


def test_submit_empty_list_makes_no_request():
    client, session, _ = _client()
    client.start_scraping_session()

    assert client.submit_jobs([]) == 0
    assert session.post.call_count == 1


def test_submit_jobs_in_ordered_chunks():
    client, session, backend = _client()
    client.start_scraping_session()
    records = _records(1250)

    processed = client.submit_jobs(records)

    assert processed == 1250
    assert [len(chunk) for chunk in backend.chunks] == [500, 500, 250]
    assert [chunk[0]["jobTitle"] for chunk in backend.chunks] == ["Job 0", "Job 500", "Job 1000"]
    chunk_urls = [call.args[0] for call in session.post.call_args_list[1:]]
    assert chunk_urls == [f"{RUNS_URL}/run-123/jobs"] * 3


def test_submit_payload_uses_api_field_names():
    client, _, backend = _client()
    client.start_scraping_session()
    record = _records(1)[0]
    no_id = JobRecord(job_title="Cook", job_url="https://www.jobbank.gc.ca/jobsearch/jobposting/1")

    client.submit_jobs([record, no_id])

    first, second = backend.chunks[0]
    assert first == {
        "jobTitle": "Job 0",
        "business": "Prairie Farms Ltd",
        "salary": "",
        "location": "Regina, Saskatchewan",
        "jobUrl": "https://www.jobbank.gc.ca/jobsearch/jobpostingtfw/40000000",
        "date": "",
        "jobBankId": "40000000",
    }
    assert "jobBankId" not in second


def test_failed_chunk_stops_submission_and_propagates():
    error = requests.HTTPError("500 Server Error")
    client, _, backend = _client(FakeBackend(fail_on_chunk=2, error=error))
    client.start_scraping_session()

    with pytest.raises(requests.HTTPError) as exc_info:
        client.submit_jobs(_records(1250))

    assert exc_info.value is error
    # first chunk delivered, second attempted, third never sent
    assert [len(chunk) for chunk in backend.chunks] == [500, 500]


def test_complete_scraping_session_reports_counts():
    client, session, backend = _client()
    client.start_scraping_session()

    client.complete_scraping_session(3, 75, 75)

    assert backend.completed == [{"total_pages": 3, "jobs_scraped": 75, "jobs_stored": 75}]
    assert session.post.call_args.args[0] == f"{RUNS_URL}/run-123/complete"


def test_complete_scraping_session_propagates_http_errors():
    client, session, _ = _client()
    client.start_scraping_session()
    session.post.side_effect = None
    session.post.return_value = make_response(error=requests.HTTPError("500"))

    with pytest.raises(requests.HTTPError):
        client.complete_scraping_session(1, 1, 1)


def test_chunk_size_constant():
    assert CHUNK_SIZE == 500
