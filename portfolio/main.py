"""Portfolio site: FastAPI application."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from portfolio.activity.events import shape_events
from portfolio.activity.loader import ActivityLoader
from portfolio.cache import LocalStore
from portfolio.collectors.github import GitHubFetchError
from portfolio.config import GITHUB_USERNAME, LOCAL_STORE_PATH, SITE_NAME, SITE_TAGLINE
from portfolio.projects import project_cache

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
log = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(title="Portfolio", version=VERSION)
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

loader = ActivityLoader(LocalStore(LOCAL_STORE_PATH))


def _site() -> dict:
    return {"name": SITE_NAME, "tagline": SITE_TAGLINE, "username": GITHUB_USERNAME}


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    activity, projects = await asyncio.gather(loader.load_events(), loader.load_projects())
    return templates.TemplateResponse(request, "index.html", {
        "site": _site(),
        "activity": activity,
        "projects": projects,
    })


@app.get("/partials/activity", response_class=HTMLResponse)
async def activity_partial(request: Request, retry: bool = False):
    activity = await loader.load_events(force=retry)
    return templates.TemplateResponse(request, "_activity.html", {"activity": activity})


@app.get("/partials/projects", response_class=HTMLResponse)
async def projects_partial(request: Request, retry: bool = False):
    projects = await loader.load_projects(force=retry)
    return templates.TemplateResponse(request, "_projects.html", {"projects": projects})


@app.get("/api/github/projects")
async def api_projects():
    try:
        return await project_cache.get()
    except GitHubFetchError as e:
        log.error(f"Projects endpoint failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch GitHub projects")


@app.get("/api/github/events")
async def api_events():
    try:
        events = await loader.raw_events()
    except GitHubFetchError as e:
        log.error(f"Events endpoint failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch GitHub activity")
    now = datetime.fromtimestamp(loader.clock(), tz=timezone.utc)
    return [{k: v for k, v in e.items() if k != "payload"} for e in shape_events(events, now)]


@app.post("/api/refresh")
async def api_refresh():
    project_cache.clear()
    loader.clear()
    activity, projects = await asyncio.gather(loader.load_events(force=True), loader.load_projects(force=True))
    return {
        "status": "refreshed",
        "activity": activity.status,
        "projects": projects.status,
        "ts": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION, "ts": datetime.now(timezone.utc).isoformat()}
