# server.py
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ValidationError

import config
from leaderboard import LeaderboardStore, ScoreRecord
from pages import ADMIN_HTML, GAME_HTML
from race import load_ai_calibration, pace_info
from sessions import InvalidUsername, PlayerSession, SessionRegistry, UsernameTaken

log = config.get_logger()

# ============================================================
#  FastAPI app
# ============================================================
app = FastAPI(title="TypeRace")

STORE = LeaderboardStore(config.LEADERBOARD_FILE)
SESSIONS = SessionRegistry(STORE)
AI_CALIBRATION: Optional[Dict[str, Any]] = load_ai_calibration(config.CALIBRATION_FILE)

NOT_PERSISTED_WARNING = "The leaderboard may not be persisted in this environment"


def clock() -> float:
    return time.monotonic()


# ============================================================
#  Request models
# ============================================================

class AuthRequest(BaseModel):
    password: Optional[str] = None


class SessionRequest(BaseModel):
    username: str = ""


class InputRequest(BaseModel):
    text: str


# ============================================================
#  Admin auth
# ============================================================


def check_admin_password(password: str) -> bool:
    return password == config.ADMIN_PASSWORD


@app.post("/api/admin/auth")
def admin_auth(req: AuthRequest):
    if not req.password:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Password is required"},
        )

    ok = check_admin_password(req.password)
    return {
        "success": ok,
        "message": "Authentication successful" if ok else "Invalid password",
    }


# ============================================================
#  /api/leaderboard
# ============================================================


@app.get("/api/leaderboard")
def get_leaderboard(checkUsername: Optional[str] = None):
    try:
        if checkUsername:
            return {"exists": STORE.username_exists(checkUsername)}
        return STORE.load()
    except Exception as e:
        log.exception("[/api/leaderboard] Internal error: %r", e)
        return JSONResponse(status_code=500, content={"error": "Failed to read leaderboard"})


@app.post("/api/leaderboard")
def save_leaderboard(payload: Any = Body(None)):
    if not isinstance(payload, list):
        return JSONResponse(status_code=400, content={"error": "Invalid leaderboard data"})

    try:
        entries = [ScoreRecord.model_validate(e).model_dump() for e in payload]
    except ValidationError as e:
        log.warning("[/api/leaderboard] Rejected entries: %s", e)
        return JSONResponse(status_code=400, content={"error": "Invalid leaderboard data"})

    if STORE.save(entries):
        return {"success": True}
    return {"success": True, "warning": NOT_PERSISTED_WARNING}


@app.delete("/api/leaderboard/reset")
def reset_leaderboard():
    if STORE.reset():
        return {"success": True}
    return {"success": True, "warning": NOT_PERSISTED_WARNING}


# ============================================================
#  Player sessions / races
# ============================================================


def _session(session_id: str, now: float) -> PlayerSession:
    try:
        return SESSIONS.get(session_id, now)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown session.")


def _session_view(session: PlayerSession, now: float) -> Dict[str, Any]:
    view = session.to_dict(now)
    if session.race is not None:
        view["pace"] = pace_info(session.difficulty, session.race.sentence, AI_CALIBRATION)
    if session.showing_leaderboard:
        view["leaderboard"] = STORE.load()
    return view


@app.post("/api/session")
def create_session(req: SessionRequest):
    now = clock()
    try:
        session = SESSIONS.create(req.username, now=now)
    except InvalidUsername as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UsernameTaken as e:
        raise HTTPException(status_code=409, detail=str(e))

    log.info("[session] %s joined", session.username)
    with session.lock:
        return _session_view(session, now)


@app.get("/api/session/{session_id}")
def get_session(session_id: str):
    now = clock()
    session = _session(session_id, now)
    with session.lock:
        session.sync(now)
        return _session_view(session, now)


@app.post("/api/session/{session_id}/race")
def prepare_race(session_id: str):
    now = clock()
    session = _session(session_id, now)
    with session.lock:
        try:
            session.prepare_race(now)
        except Exception as e:
            log.exception("[/race] Internal error: %r", e)
            raise HTTPException(status_code=500, detail="Internal race error: " + str(e))
        return _session_view(session, now)


@app.get("/api/session/{session_id}/race")
def race_state(session_id: str):
    now = clock()
    session = _session(session_id, now)
    with session.lock:
        if session.race is None:
            raise HTTPException(status_code=409, detail="No race prepared yet.")
        session.sync(now)
        return session.race.to_dict(now)


@app.post("/api/session/{session_id}/race/input")
def race_input(session_id: str, req: InputRequest):
    now = clock()
    session = _session(session_id, now)
    with session.lock:
        if session.race is None:
            raise HTTPException(status_code=409, detail="No race prepared yet.")
        session.race.type(req.text, now)
        session.sync(now)
        return session.race.to_dict(now)


@app.post("/api/session/{session_id}/finish")
def finish_session(session_id: str):
    now = clock()
    session = _session(session_id, now)
    table = session.finish_early(now)
    return {"leaderboard": table}


@app.delete("/api/session/{session_id}")
def end_session(session_id: str):
    now = clock()
    session = _session(session_id, now)
    session.close(now)
    SESSIONS.drop(session_id)
    return {"ok": True}


# ============================================================
#  Pages
# ============================================================


@app.get("/", response_class=HTMLResponse)
def game(_: Request) -> HTMLResponse:
    return HTMLResponse(GAME_HTML)


@app.get("/admin", response_class=HTMLResponse)
def admin(_: Request) -> HTMLResponse:
    return HTMLResponse(ADMIN_HTML)
