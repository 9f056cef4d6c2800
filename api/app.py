from __future__ import annotations
from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import logging, typing as t
from collections import OrderedDict

# ---- Engine imports ----
import quiz_core.question_bank as qb
from quiz_core.audit_export import to_csv as attempts_to_csv, to_json as attempts_to_json
from quiz_core.composer import GenerationError, QuizComposer
from quiz_core.config import (
    ATTEMPT_EXPORT_ENABLED,
    FINISHED_EXPORTS_LIMIT,
    load_config,
    load_settings,
    make_rng,
)
from quiz_core.engine import ActiveQuiz, AdaptiveEngine
from quiz_core.llm_bridge import QuestionGenerator, TextGenerator
from quiz_core.llm_cfg import backend_in_use
from quiz_core.reporting import profile_report
from quiz_core.session import SessionStateError
from quiz_core.types import QuizAttempt, profile_to_dict, question_to_dict
from .storage import (
    JsonProfileStore,
    get_profile,
    list_profiles,
    recent_completions,
    record_completion,
)

log = logging.getLogger(__name__)

ACTIVE: dict[str, ActiveQuiz] = {}
FINISHED: OrderedDict[str, list[QuizAttempt]] = OrderedDict()  # sid -> attempts, oldest first
GENERATOR: QuestionGenerator | None = None  # override hook for a preconfigured generator

app = FastAPI(title="Adaptive Quiz API")

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class StartReq(BaseModel):
    student_id: str
    student_name: str | None = None

class SelectReq(BaseModel):
    option: int

# ---- Helpers ----
def _generator() -> QuestionGenerator | None:
    if GENERATOR is not None:
        return GENERATOR
    if backend_in_use() != "none":
        return TextGenerator()
    return None


def _build_engine() -> AdaptiveEngine:
    cfg = load_config()
    composer = QuizComposer(
        qb.InMemoryQuestionBank(qb.load_bank()),
        generator=_generator(),
        rng=make_rng(cfg),
    )
    return AdaptiveEngine(composer, JsonProfileStore(), load_settings(cfg), completion_log=record_completion)


def _build_settings():
    return load_settings(load_config())


def _get_active(sid: str) -> ActiveQuiz:
    active = ACTIVE.get(sid)
    if active is None or active.session is None:
        raise HTTPException(404, "session not found")
    return active


def _retire(sid: str, active: ActiveQuiz) -> None:
    """Drop a completed session, keeping only its attempts for export."""
    ACTIVE.pop(sid, None)
    FINISHED[sid] = active.session.attempts
    while len(FINISHED) > FINISHED_EXPORTS_LIMIT:
        FINISHED.popitem(last=False)


def _finished_attempts(sid: str) -> list[QuizAttempt]:
    if not ATTEMPT_EXPORT_ENABLED:
        raise HTTPException(404, "attempt export disabled")
    attempts = FINISHED.get(sid)
    if attempts is None:
        if sid in ACTIVE:
            raise HTTPException(409, "session not completed")
        raise HTTPException(404, "session not found")
    return attempts


def _session_view(sid: str, active: ActiveQuiz) -> dict[str, t.Any]:
    sess = active.session
    cur = sess.current_question
    return {
        "session_id": sid,
        "state": sess.state,
        "index": sess.index,
        "total": len(sess.questions),
        "question": question_to_dict(cur, reveal=False) if cur else None,
        "selected": sess.pending_selection,
    }


def _outcome_view(active: ActiveQuiz) -> dict[str, t.Any]:
    out = active.outcome
    if out is None:
        return {}
    return {
        "fit_score": out.fit_score,
        "summary": out.summary,
        "profile": profile_to_dict(out.profile),
        "report": profile_report(out.profile, _build_settings()),
    }

# ---- Health ----
@app.get("/")
def root():
    return {"status": "ok", "service": "adaptive-quiz-api"}

@app.get("/health")
def health():
    settings = _build_settings()
    return {
        "llm_backend": backend_in_use(),
        "adaptive_source": settings.adaptive_source,
        "pool_size": settings.pool_size,
        "min_questions_before_adaptation": settings.min_questions_before_adaptation,
    }

# ---- Quiz lifecycle ----
@app.post("/quiz/start")
def start(req: StartReq):
    engine = _build_engine()
    try:
        active = engine.start_quiz(req.student_id, req.student_name)
    except GenerationError as e:
        raise HTTPException(502, str(e))
    sid = active.session.id
    ACTIVE[sid] = active
    body = _session_view(sid, active)
    body.update({
        "mode": active.plan.mode,
        "source": active.plan.source,
        "questions": [question_to_dict(q, reveal=False) for q in active.questions],
    })
    if active.session.is_completed:
        body["result"] = _outcome_view(active)
        _retire(sid, active)
    return body

@app.get("/quiz/{sid}")
def current(sid: str):
    return _session_view(sid, _get_active(sid))

@app.post("/quiz/{sid}/select")
def select(sid: str, req: SelectReq):
    active = _get_active(sid)
    try:
        active.session.select_answer(req.option)
    except SessionStateError as e:
        raise HTTPException(409, str(e))
    return _session_view(sid, active)

@app.post("/quiz/{sid}/advance")
def advance(sid: str):
    active = _get_active(sid)
    try:
        active.session.advance()
    except SessionStateError as e:
        raise HTTPException(409, str(e))
    body = _session_view(sid, active)
    body["done"] = active.session.is_completed
    if active.session.is_completed:
        body["result"] = _outcome_view(active)
        _retire(sid, active)
    return body

@app.delete("/quiz/{sid}")
def abandon(sid: str):
    active = ACTIVE.pop(sid, None)
    if active is None:
        if FINISHED.pop(sid, None) is None:
            raise HTTPException(404, "session not found")
        return {"ok": True}
    if active.session is not None:
        log.info("session=%s abandoned at index=%d", sid, active.session.index)
    return {"ok": True}

@app.get("/quiz/{sid}/attempts.json")
def get_attempts_json(sid: str):
    return {"session_id": sid, **attempts_to_json(_finished_attempts(sid))}

@app.get("/quiz/{sid}/attempts.csv")
def get_attempts_csv(sid: str):
    body = attempts_to_csv(_finished_attempts(sid))
    filename = f"{sid}_attempts.csv"
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )

# ---- Dashboards ----
@app.get("/students/{student_id}/profile")
def student_profile(student_id: str):
    profile = get_profile(student_id)
    return {"profile": profile_to_dict(profile), "report": profile_report(profile, _build_settings())}

@app.get("/completions/recent")
def completions(limit: int = Query(5, ge=1, le=100)):
    return {"completions": recent_completions(limit)}

@app.get("/profiles")
def profiles():
    settings = _build_settings()
    return {"profiles": [profile_report(p, settings) for p in list_profiles()]}
