import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from listings import config

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load job listings. Please try again later."


class Job(BaseModel):
    id: Optional[Union[int, str]] = None
    company: str = ""
    logo: str = ""
    position: str = ""
    role: str = ""
    level: str = ""
    posted_at: str = Field("", alias="postedAt")
    contract: str = ""
    location: str = ""
    languages: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()
    featured: bool = False
    is_new: bool = Field(False, alias="new")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def tags(self) -> list[str]:
        """Role, level, languages and tools in display order; blanks skipped."""
        head = [t for t in (self.role, self.level) if t]
        return [*head, *self.languages, *self.tools]


_JOB_LIST = TypeAdapter(list[Job])


class LoadError(Exception):
    """Raised when the job data cannot be fetched or parsed."""

    def __init__(self, reason: str, message: str = LOAD_ERROR_MESSAGE):
        super().__init__(reason)
        self.reason = reason
        self.message = message


def matches(job: Job, active_filters: Iterable[str]) -> bool:
    job_tags = {t.lower() for t in job.tags}
    return all(f.lower() in job_tags for f in active_filters)


def filter_jobs(jobs: Iterable[Job], active_filters: Iterable[str] = ()) -> list[Job]:
    active_filters = list(active_filters)
    if not active_filters:
        return list(jobs)
    return [j for j in jobs if matches(j, active_filters)]


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _fetch(source: str, *, timeout: float, transport: Optional[httpx.AsyncBaseTransport]) -> bytes:
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.get(source)
        response.raise_for_status()
        return response.content


def _read(source: str) -> bytes:
    path = Path(source)
    if not path.is_absolute():
        path = config.BASE_DIR / path
    return path.read_bytes()


async def load_jobs(
    source: Optional[str] = None,
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[Job]:
    """
    Fetch and parse the job list from a URL or a file path.

    Any network, HTTP status, I/O or parse failure is raised as LoadError.
    """
    source = source or config.DATA_SOURCE
    timeout = config.FETCH_TIMEOUT if timeout is None else timeout
    try:
        if _is_url(source):
            payload = await _fetch(source, timeout=timeout, transport=transport)
        else:
            payload = await asyncio.to_thread(_read, source)
        jobs = _JOB_LIST.validate_json(payload)
    except httpx.HTTPStatusError as exc:
        logger.error("Error loading job data from %s: HTTP status %s", source, exc.response.status_code)
        raise LoadError(f"HTTP error! status: {exc.response.status_code}") from exc
    except (httpx.HTTPError, OSError, ValidationError) as exc:
        logger.error("Error loading job data from %s: %s", source, exc)
        raise LoadError(str(exc)) from exc

    logger.info("Loaded %d jobs from %s", len(jobs), source)
    return jobs


__all__ = ["Job", "LoadError", "filter_jobs", "load_jobs", "matches"]
