# etell/server.py
"""
FastAPI server exposing stored sessions and the placement/layout analyses.
"""

from fastapi import FastAPI, Request, status
from starlette.responses import JSONResponse

from etell.analysis.advice import session_advice
from etell.analysis.editor import LayoutEditor
from etell.analysis.layout import analyze_layout
from etell.analysis.placement import analyze_optimal_placement
from etell.errors import DuplicateSampleError, EtellError, SessionExistsError, SessionNotFoundError
from etell.storage.dao import DAO
from etell.utils.log import get_logger
from etell.utils.validate import (
    FloorLayout,
    InsufficientData,
    LayoutResult,
    PlacementResult,
    Sample,
    Session,
    SessionAdvice,
    SessionSummary,
)

logger = get_logger(__name__)


async def etell_exception_handler(request: Request, exc: EtellError) -> JSONResponse:
    """
    Render etell errors as JSON: unknown sessions are 404, conflicts with
    stored data 409, the rest 400.
    """
    if isinstance(exc, SessionNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (SessionExistsError, DuplicateSampleError)):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    logger.warning("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


def create_app(db_path: str) -> FastAPI:
    """
    Build a FastAPI instance bound to a session database.
    """
    app = FastAPI()
    app.state.db_path = db_path
    app.add_exception_handler(EtellError, etell_exception_handler)

    def _dao(request: Request) -> DAO:
        return DAO(request.app.state.db_path)

    @app.get("/api/status", response_class=JSONResponse)
    async def get_status() -> JSONResponse:
        return JSONResponse(status_code=200, content={"status": "ok"})

    @app.get("/api/sessions", response_model=list[SessionSummary])
    async def list_sessions(request: Request):
        return _dao(request).list_sessions()

    @app.post("/api/sessions", status_code=201)
    async def add_session(request: Request, session: Session):
        """
        Store an uploaded calibration session.
        """
        _dao(request).add_session(session)
        logger.info("Stored session %s (%d samples)", session.id, len(session.samples))
        return {"id": session.id}

    @app.get("/api/sessions/{session_id}", response_model=Session)
    async def get_session(request: Request, session_id: str):
        return _dao(request).get_session(session_id)

    @app.get(
        "/api/sessions/{session_id}/placement",
        response_model=PlacementResult | InsufficientData,
    )
    async def get_session_placement(request: Request, session_id: str):
        session = _dao(request).get_session(session_id)
        return analyze_optimal_placement(session)

    @app.get("/api/sessions/{session_id}/layout", response_model=LayoutResult)
    async def get_session_layout(request: Request, session_id: str):
        """
        Layout analysis over the default grid built from the session's samples.
        """
        session = _dao(request).get_session(session_id)
        return LayoutEditor.from_samples(session.samples).analyze()

    @app.get("/api/sessions/{session_id}/advice", response_model=SessionAdvice)
    async def get_session_advice(request: Request, session_id: str):
        return session_advice(_dao(request).get_session(session_id))

    @app.post("/api/placement", response_model=PlacementResult | InsufficientData)
    async def post_placement(samples: list[Sample]):
        return analyze_optimal_placement(samples)

    @app.post("/api/layout", response_model=LayoutResult)
    async def post_layout(floors: list[FloorLayout]):
        return analyze_layout(floors)

    return app
