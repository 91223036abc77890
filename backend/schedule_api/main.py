from __future__ import annotations

from typing import Any, Dict, List, Sequence

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .database import engine, get_db
from .schemas import MessageResponse, TripListPayload
from .services import TripModel, clear_trips, list_trips, replace_trips

models.Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name)
app.state.ignored_patterns = list(settings.ignored_patterns)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


def register_schedule_endpoints(path: str, model: TripModel, preserve_fields: Sequence[str] = ()) -> None:
    """GET/POST/DELETE for one stored trip list."""
    name = model.__tablename__

    @app.get(path, response_model=List[Dict[str, Any]], name=f"{name}_list")
    def get_trips(request: Request, db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
        return list_trips(db, model, request.app.state.ignored_patterns)

    @app.post(
        path,
        response_model=MessageResponse,
        responses={status.HTTP_400_BAD_REQUEST: {"model": MessageResponse}},
        name=f"{name}_save",
    )
    def save_trips(payload: TripListPayload, request: Request, db: Session = Depends(get_db)):
        if payload.trips is None:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST, content={"message": "No schedule trips found"}
            )
        replace_trips(
            db,
            model,
            payload.trips,
            ignored_patterns=request.app.state.ignored_patterns,
            preserve=payload.preserve_drivers,
            preserve_fields=preserve_fields,
        )
        return MessageResponse(message="Saved")

    @app.delete(path, response_model=MessageResponse, name=f"{name}_clear")
    def delete_trips(db: Session = Depends(get_db)) -> MessageResponse:
        clear_trips(db, model)
        return MessageResponse(message="Cleared")


register_schedule_endpoints("/api/schedule-tool", models.LeftScheduleTrip)
register_schedule_endpoints(
    "/api/schedule-tool2", models.RightScheduleTrip, preserve_fields=("Driver1", "fromLeftIndex")
)
