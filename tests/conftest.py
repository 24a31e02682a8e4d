"""
Pytest fixtures for the job listings board.
"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from listings import config, sessions
from listings.controller import ListingController
from listings.jobs import Job


JOB_RECORDS = [
    {
        "id": 1,
        "company": "Photosnap",
        "logo": "./images/photosnap.svg",
        "new": True,
        "featured": True,
        "position": "Senior Frontend Developer",
        "role": "Developer",
        "level": "Senior",
        "postedAt": "1d ago",
        "contract": "Full Time",
        "location": "USA Only",
        "languages": ["JavaScript"],
        "tools": [],
    },
    {
        "id": 2,
        "company": "Manage",
        "logo": "./images/manage.svg",
        "new": False,
        "featured": False,
        "position": "Junior Backend Developer",
        "role": "Developer",
        "level": "Junior",
        "postedAt": "2d ago",
        "contract": "Part Time",
        "location": "Remote",
        "languages": ["Python"],
        "tools": ["Django"],
    },
]


@pytest.fixture
def job_records():
    return [dict(record) for record in JOB_RECORDS]


@pytest.fixture
def jobs(job_records):
    return [Job.model_validate(record) for record in job_records]


@pytest.fixture
def data_file(tmp_path, job_records):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(job_records), encoding="utf-8")
    return path


@pytest.fixture
def controller(data_file):
    """A controller in the READY state holding the two sample jobs."""
    controller = ListingController(announce_duration=1.0)
    asyncio.run(controller.start(str(data_file)))
    return controller


@pytest.fixture
def announcements(controller):
    """Texts of every status message the controller emits."""
    messages = []
    controller.bus.on("announce", lambda message: messages.append(message.text))
    return messages


@pytest.fixture(autouse=True)
def clear_sessions():
    sessions.sessions.clear()
    yield
    sessions.sessions.clear()


@pytest.fixture
def client(monkeypatch, data_file):
    monkeypatch.setattr(config, "DATA_SOURCE", str(data_file))
    from app import app
    return TestClient(app)


@pytest.fixture
def current_session(client):
    """Look up the session behind the client's cookie."""
    def _current():
        return sessions.get_session(session_id=client.cookies.get("session_id"))
    return _current
