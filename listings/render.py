from typing import Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from listings import config
from listings.controller import ListingController, State
from listings.jobs import Job

templates = Environment(
    loader=FileSystemLoader(config.TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


class Regions(BaseModel):
    cards: str
    chips: str
    count: int
    has_filters: bool


def render_cards(jobs: Iterable[Job], *, csrf_token: str = "") -> str:
    return templates.get_template("_cards.html").render(jobs=list(jobs), csrfToken=csrf_token)


def render_chips(filters: Iterable[str], *, csrf_token: str = "") -> str:
    return templates.get_template("_chips.html").render(filters=list(filters), csrfToken=csrf_token)


def render_error(message: str) -> str:
    return templates.get_template("_error.html").render(message=message)


def render_regions(controller: ListingController, *, csrf_token: str = "") -> Regions:
    filters = list(controller.filters)
    if controller.state is State.ERROR:
        cards, count = render_error(controller.error or ""), 0
    else:
        jobs = controller.get_filtered_jobs()
        cards, count = render_cards(jobs, csrf_token=csrf_token), len(jobs)
    return Regions(
        cards=cards,
        chips=render_chips(filters, csrf_token=csrf_token),
        count=count,
        has_filters=bool(filters),
    )


def render_page(controller: ListingController, *, csrf_token: str = "") -> str:
    regions = render_regions(controller, csrf_token=csrf_token)
    return templates.get_template("index.html").render(
        regions=regions,
        state=controller.state.value,
        csrfToken=csrf_token,
    )


__all__ = ["Regions", "render_cards", "render_chips", "render_error", "render_page", "render_regions", "templates"]
