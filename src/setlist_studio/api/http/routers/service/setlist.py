"""Setlist API: CRUD, song placement, templates, bookings, timing and CSV export."""

from datetime import datetime
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from src.setlist_studio.api.http.deps import (
    get_current_principal,
    get_duration_service,
    get_export_service,
    get_performance_date_service,
    get_setlist_service,
)
from src.setlist_studio.core.models import PaginatedResult, SetlistDuration
from src.setlist_studio.core.services import (
    AuthenticatedPrincipal,
    PerformanceDateService,
    SetlistDurationService,
    SetlistExportService,
    SetlistService,
)
from src.setlist_studio.entities.service.performance_date import PerformanceDate
from src.setlist_studio.entities.service.setlist import Setlist
from src.setlist_studio.entities.service.setlist_song import SetlistSong

router = APIRouter(prefix="/setlists", tags=["setlists"])


class SetlistInput(BaseModel):
    name: str = ""
    description: str | None = None
    venue: str | None = None
    performance_date: datetime | None = None
    expected_duration_minutes: int | None = None
    is_template: bool = False
    is_active: bool = True
    performance_notes: str | None = None

    def to_setlist(self, user_id: str, setlist_id: str | None = None) -> Setlist:
        setlist = Setlist(**self.model_dump(), user_id=user_id)
        if setlist_id is not None:
            setlist.id = setlist_id
        return setlist


class AddSongRequest(BaseModel):
    song_id: str
    position: int | None = Field(default=None, ge=1)


class ReorderRequest(BaseModel):
    song_ids: list[str] = Field(description="Song ids in their new order")


class SetlistSongUpdate(BaseModel):
    performance_notes: str | None = None
    transition_notes: str | None = None
    custom_bpm: int | None = None
    custom_key: str | None = None
    is_encore: bool | None = None
    is_optional: bool | None = None


class CopyRequest(BaseModel):
    name: str


class FromTemplateRequest(BaseModel):
    name: str
    performance_date: datetime | None = None
    venue: str | None = None
    performance_notes: str | None = None


class PerformanceDateInput(BaseModel):
    date: datetime
    venue: str | None = None
    notes: str | None = None


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Setlist not found")


@router.get("", response_model=PaginatedResult[Setlist])
def list_setlists(
    search: str | None = None,
    is_template: bool | None = None,
    is_active: bool | None = None,
    page_number: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> PaginatedResult[Setlist]:
    setlists, total = service.get_setlists(
        principal.user_id,
        search_term=search,
        is_template=is_template,
        is_active=is_active,
        page_number=page_number,
        page_size=page_size,
    )
    return PaginatedResult[Setlist](
        items=setlists, page_number=page_number, page_size=page_size, total_count=total
    )


@router.post("", response_model=Setlist, status_code=201)
def create_setlist(
    payload: SetlistInput,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> Setlist:
    try:
        return service.create_setlist(payload.to_setlist(principal.user_id))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/songs/{setlist_song_id}", response_model=SetlistSong)
def update_setlist_song(
    setlist_song_id: str,
    payload: SetlistSongUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> SetlistSong:
    """Set per-performance overrides for one entry; omitted fields are unchanged."""
    try:
        entry = service.update_setlist_song(
            setlist_song_id, principal.user_id, **payload.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if entry is None:
        raise HTTPException(status_code=404, detail="Setlist song not found")
    return entry


@router.get("/performance-dates/upcoming", response_model=PaginatedResult[PerformanceDate])
def list_upcoming_performance_dates(
    page_number: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: PerformanceDateService = Depends(get_performance_date_service),
) -> PaginatedResult[PerformanceDate]:
    dates, total = service.get_upcoming_performance_dates(
        principal.user_id, page_number=page_number, page_size=page_size
    )
    return PaginatedResult[PerformanceDate](
        items=dates, page_number=page_number, page_size=page_size, total_count=total
    )


@router.delete("/performance-dates/{performance_date_id}")
def delete_performance_date(
    performance_date_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: PerformanceDateService = Depends(get_performance_date_service),
) -> dict[str, str]:
    if not service.delete_performance_date(performance_date_id, principal.user_id):
        raise HTTPException(status_code=404, detail="Performance date not found")
    return {"message": "Performance date deleted successfully"}


@router.get("/{setlist_id}", response_model=Setlist)
def get_setlist(
    setlist_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> Setlist:
    setlist = service.get_setlist(setlist_id, principal.user_id)
    if setlist is None:
        raise _not_found()
    return setlist


@router.put("/{setlist_id}", response_model=Setlist)
def update_setlist(
    setlist_id: str,
    payload: SetlistInput,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> Setlist:
    try:
        updated = service.update_setlist(
            payload.to_setlist(principal.user_id, setlist_id), principal.user_id
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if updated is None:
        raise _not_found()
    return updated


@router.delete("/{setlist_id}")
def delete_setlist(
    setlist_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> dict[str, str]:
    if not service.delete_setlist(setlist_id, principal.user_id):
        raise _not_found()
    return {"message": "Setlist deleted successfully"}


@router.post("/{setlist_id}/songs", response_model=SetlistSong, status_code=201)
def add_song(
    setlist_id: str,
    payload: AddSongRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> SetlistSong:
    try:
        entry = service.add_song(setlist_id, payload.song_id, principal.user_id, payload.position)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if entry is None:
        raise HTTPException(
            status_code=404, detail="Setlist or song not found, or song already in setlist"
        )
    return entry


@router.delete("/{setlist_id}/songs/{song_id}")
def remove_song(
    setlist_id: str,
    song_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> dict[str, str]:
    if not service.remove_song(setlist_id, song_id, principal.user_id):
        raise HTTPException(status_code=404, detail="Song not found in setlist")
    return {"message": "Song removed from setlist"}


@router.put("/{setlist_id}/songs/order")
def reorder_songs(
    setlist_id: str,
    payload: ReorderRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> dict[str, str]:
    if not service.reorder_songs(setlist_id, payload.song_ids, principal.user_id):
        raise HTTPException(status_code=400, detail="Invalid song ordering")
    return {"message": "Setlist reordered"}


@router.post("/{setlist_id}/copy", response_model=Setlist, status_code=201)
def copy_setlist(
    setlist_id: str,
    payload: CopyRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> Setlist:
    try:
        copy = service.copy_setlist(setlist_id, payload.name, principal.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if copy is None:
        raise _not_found()
    return copy


@router.post("/{setlist_id}/from-template", response_model=Setlist, status_code=201)
def create_from_template(
    setlist_id: str,
    payload: FromTemplateRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistService = Depends(get_setlist_service),
) -> Setlist:
    try:
        created = service.create_from_template(
            setlist_id,
            principal.user_id,
            payload.name,
            performance_date=payload.performance_date,
            venue=payload.venue,
            performance_notes=payload.performance_notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if created is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return created


@router.get("/{setlist_id}/performance-dates", response_model=list[PerformanceDate])
def list_performance_dates(
    setlist_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: PerformanceDateService = Depends(get_performance_date_service),
) -> list[PerformanceDate]:
    dates = service.get_performance_dates(setlist_id, principal.user_id)
    if dates is None:
        raise _not_found()
    return dates


@router.post("/{setlist_id}/performance-dates", response_model=PerformanceDate, status_code=201)
def create_performance_date(
    setlist_id: str,
    payload: PerformanceDateInput,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: PerformanceDateService = Depends(get_performance_date_service),
) -> PerformanceDate:
    try:
        created = service.create_performance_date(
            PerformanceDate(setlist_id=setlist_id, user_id=principal.user_id, **payload.model_dump())
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if created is None:
        raise _not_found()
    return created


@router.get("/{setlist_id}/duration", response_model=SetlistDuration)
def get_setlist_duration(
    setlist_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SetlistDurationService = Depends(get_duration_service),
) -> SetlistDuration:
    """Estimated running time: song lengths plus predicted changeovers."""
    duration = service.calculate_duration(setlist_id, principal.user_id)
    if duration is None:
        raise _not_found()
    return duration


@router.get("/{setlist_id}/export/csv")
def export_setlist_csv(
    setlist_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    export_service: SetlistExportService = Depends(get_export_service),
) -> Response:
    export = export_service.export_setlist(setlist_id, principal.user_id)
    if export is None:
        raise _not_found()

    ascii_name = export.filename.encode("ascii", "replace").decode("ascii")
    return Response(
        content=export.content,
        media_type="text/csv",
        headers={
            "Content-Disposition": (
                f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(export.filename)}"
            )
        },
    )
