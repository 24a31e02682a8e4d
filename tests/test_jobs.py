"""
Tests for the job model, tag derivation, filtering and loading.
"""

import asyncio
import json

import httpx
import pytest

from listings.jobs import Job, LoadError, filter_jobs, load_jobs


def _job(**fields):
    return Job.model_validate(fields)


class TestJobModel:
    def test_reads_camel_case_and_new_keys(self, jobs):
        job = jobs[0]
        assert job.posted_at == "1d ago"
        assert job.is_new is True
        assert job.featured is True

    def test_missing_fields_default_to_blank(self):
        job = _job(company="Acme")
        assert job.position == ""
        assert job.languages == ()
        assert job.is_new is False
        assert job.id is None

    def test_is_immutable(self, jobs):
        with pytest.raises(Exception):
            jobs[0].company = "Other"

    def test_tags_in_display_order(self):
        job = _job(role="Frontend", level="Senior", languages=["HTML", "CSS"], tools=["React"])
        assert job.tags == ["Frontend", "Senior", "HTML", "CSS", "React"]

    def test_tags_keep_duplicates_and_case(self):
        job = _job(role="Frontend", level="Junior", languages=["JavaScript"], tools=["javascript", "JavaScript"])
        assert job.tags == ["Frontend", "Junior", "JavaScript", "javascript", "JavaScript"]

    def test_tags_skip_blank_role_and_level(self):
        job = _job(languages=["Python"])
        assert job.tags == ["Python"]


class TestFilterJobs:
    def test_no_filters_returns_everything_in_order(self, jobs):
        assert filter_jobs(jobs, []) == jobs

    def test_matching_is_case_insensitive(self, jobs):
        assert filter_jobs(jobs, ["senior"]) == [jobs[0]]
        assert filter_jobs(jobs, ["PYTHON"]) == [jobs[1]]

    def test_filters_combine_with_and(self, jobs):
        assert filter_jobs(jobs, ["Developer", "Senior"]) == [jobs[0]]
        assert filter_jobs(jobs, ["Senior", "Python"]) == []

    def test_matches_whole_tags_only(self, jobs):
        assert filter_jobs(jobs, ["Java"]) == []

    def test_preserves_original_order(self, jobs):
        assert filter_jobs(jobs, ["developer"]) == jobs


class TestLoadJobs:
    def test_loads_from_file(self, data_file):
        jobs = asyncio.run(load_jobs(str(data_file)))
        assert [j.company for j in jobs] == ["Photosnap", "Manage"]

    def test_loads_from_url(self, job_records):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=job_records))
        jobs = asyncio.run(load_jobs("https://jobs.example.com/data.json", transport=transport))
        assert len(jobs) == 2

    def test_http_404_raises_load_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        with pytest.raises(LoadError) as exc_info:
            asyncio.run(load_jobs("https://jobs.example.com/data.json", transport=transport))
        assert "404" in exc_info.value.reason
        assert exc_info.value.message == "Failed to load job listings. Please try again later."

    def test_network_error_raises_load_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(LoadError):
            asyncio.run(load_jobs("https://jobs.example.com/data.json", transport=httpx.MockTransport(refuse)))

    def test_missing_file_raises_load_error(self, tmp_path):
        with pytest.raises(LoadError):
            asyncio.run(load_jobs(str(tmp_path / "missing.json")))

    def test_malformed_json_raises_load_error(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LoadError):
            asyncio.run(load_jobs(str(path)))

    def test_non_array_document_raises_load_error(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"jobs": []}), encoding="utf-8")
        with pytest.raises(LoadError):
            asyncio.run(load_jobs(str(path)))

    def test_bundled_data_file_loads(self):
        jobs = asyncio.run(load_jobs("data/data.json"))
        assert len(jobs) == 10
        assert all(job.tags for job in jobs)
