"""Erasmus Journey — Shared FastAPI Dependencies."""

from typing import Optional

from fastapi import Depends, Request
from sqlmodel import Session

from erasmus_journey.database import get_session
from erasmus_journey.repositories.destination_repository import SqlDestinationRepository
from erasmus_journey.repositories.submission_repository import SqlSubmissionRepository
from erasmus_journey.scheduler.refresh_queue import RefreshQueue
from erasmus_journey.services.destination_service import DestinationService
from erasmus_journey.services.search_service import SearchService


def get_refresh_queue(request: Request) -> Optional[RefreshQueue]:
    """The app-wide refresh queue, started in the lifespan (None if absent)."""
    return getattr(request.app.state, "refresh_queue", None)


def get_destination_service(
    session: Session = Depends(get_session),
    refresh_queue: Optional[RefreshQueue] = Depends(get_refresh_queue),
) -> DestinationService:
    return DestinationService(
        SqlSubmissionRepository(session),
        SqlDestinationRepository(session),
        refresh_queue,
    )


def get_search_service(session: Session = Depends(get_session)) -> SearchService:
    return SearchService(SqlSubmissionRepository(session), SqlDestinationRepository(session))
