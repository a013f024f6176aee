"""
Unit tests for the profile and job fetchers.

The requests.Session is mocked; no network access.
"""
from unittest.mock import MagicMock

import pytest
import requests

from core.clients import (
    JobFetcher,
    NotFound,
    ProfileFetcher,
    UpstreamError,
    UpstreamUnavailable,
)


def _response(status_code=200, payload=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("no JSON")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def profiles(session):
    return ProfileFetcher("http://resume:4003/", request_timeout_seconds=5, max_attempts=2, session=session)


@pytest.fixture
def jobs(session):
    return JobFetcher("http://jobs:4002", request_timeout_seconds=5, max_attempts=2, session=session)


class TestProfileFetcher:

    def test_returns_profile_analysis(self, profiles, session):
        session.get.return_value = _response(payload={
            "profileAnalysis": {"coreCompetencies": [{"skill": "Python"}]},
            "personalInfo": {"name": "Ada", "email": "ada@example.com"},
            "original_name": "ada.pdf",
        })

        profile = profiles.fetch_profile("r1", "tok")

        assert profile["coreCompetencies"] == [{"skill": "Python"}]
        assert profile["personalInfo"]["name"] == "Ada"
        assert profile["original_name"] == "ada.pdf"

        args, kwargs = session.get.call_args
        assert args[0] == "http://resume:4003/resumes/r1/profile"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert kwargs["timeout"] == 5

    def test_resume_id_is_url_quoted(self, profiles, session):
        session.get.return_value = _response(payload={"profileAnalysis": {"a": 1}})

        profiles.fetch_profile("a/b c", "tok")

        assert session.get.call_args[0][0] == "http://resume:4003/resumes/a%2Fb%20c/profile"

    def test_404_is_not_found(self, profiles, session):
        session.get.return_value = _response(404, {"error": "Resume not found"})

        with pytest.raises(NotFound) as exc_info:
            profiles.fetch_profile("missing", "tok")
        assert exc_info.value.status_code == 404

    def test_missing_analysis_is_not_found(self, profiles, session):
        session.get.return_value = _response(payload={"profileAnalysis": None})

        with pytest.raises(NotFound):
            profiles.fetch_profile("r1", "tok")

    def test_403_is_upstream_error_without_retry(self, profiles, session):
        session.get.return_value = _response(403, {"error": "forbidden"})

        with pytest.raises(UpstreamError) as exc_info:
            profiles.fetch_profile("r1", "tok")
        assert exc_info.value.status_code == 403
        assert session.get.call_count == 1

    def test_connection_error_is_unavailable_after_retries(self, profiles, session):
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(UpstreamUnavailable):
            profiles.fetch_profile("r1", "tok")
        assert session.get.call_count == 2

    def test_timeout_is_unavailable(self, profiles, session):
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(UpstreamUnavailable):
            profiles.fetch_profile("r1", "tok")

    def test_5xx_retried_then_upstream_error(self, profiles, session):
        session.get.return_value = _response(503)

        with pytest.raises(UpstreamError) as exc_info:
            profiles.fetch_profile("r1", "tok")
        assert exc_info.value.status_code == 503
        assert session.get.call_count == 2

    def test_5xx_then_success(self, profiles, session):
        session.get.side_effect = [
            _response(502),
            _response(payload={"profileAnalysis": {"coreCompetencies": []}}),
        ]

        assert profiles.fetch_profile("r1", "tok") == {"coreCompetencies": []}

    def test_invalid_json_is_upstream_error(self, profiles, session):
        session.get.return_value = _response(json_error=True)

        with pytest.raises(UpstreamError):
            profiles.fetch_profile("r1", "tok")


class TestJobFetcher:

    def test_returns_jobs_with_params(self, jobs, session):
        session.get.return_value = _response(payload={"jobs": [{"job_id": "1"}, {"job_id": "2"}]})

        result = jobs.fetch_jobs("tok", limit=100)

        assert [j["job_id"] for j in result] == ["1", "2"]
        args, kwargs = session.get.call_args
        assert args[0] == "http://jobs:4002/jobs"
        assert kwargs["params"] == {"limit": 100, "page": 1, "status": "active"}

    def test_empty_list_is_not_an_error(self, jobs, session):
        session.get.return_value = _response(payload={"jobs": []})

        assert jobs.fetch_jobs("tok") == []

    def test_missing_jobs_key_is_empty(self, jobs, session):
        session.get.return_value = _response(payload={"pagination": {}})

        assert jobs.fetch_jobs("tok") == []

    def test_result_capped_at_limit(self, jobs, session):
        session.get.return_value = _response(payload={"jobs": [{"job_id": str(i)} for i in range(150)]})

        assert len(jobs.fetch_jobs("tok", limit=100)) == 100

    def test_non_list_jobs_is_upstream_error(self, jobs, session):
        session.get.return_value = _response(payload={"jobs": "oops"})

        with pytest.raises(UpstreamError):
            jobs.fetch_jobs("tok")

    def test_analyzed_only_flag(self, jobs, session):
        session.get.return_value = _response(payload={"jobs": []})

        jobs.fetch_jobs("tok", analyzed_only=True)

        assert session.get.call_args[1]["params"]["analyzed_only"] == "true"

    def test_404_is_not_found(self, jobs, session):
        session.get.return_value = _response(404)

        with pytest.raises(NotFound):
            jobs.fetch_jobs("tok")
