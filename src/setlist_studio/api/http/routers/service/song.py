"""Song library API."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from src.setlist_studio.api.http.deps import get_current_principal, get_song_service
from src.setlist_studio.core.models import PaginatedResult
from src.setlist_studio.core.services import AuthenticatedPrincipal, SongService
from src.setlist_studio.entities.service.song import Song

router = APIRouter(prefix="/songs", tags=["songs"])


class SongInput(BaseModel):
    """Editable song fields accepted from clients."""

    title: str = ""
    artist: str = ""
    album: str | None = None
    genre: str | None = None
    bpm: int | None = None
    musical_key: str | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    tags: str | None = None
    difficulty_rating: int | None = None

    def to_song(self, user_id: str, song_id: str | None = None) -> Song:
        song = Song(**self.model_dump(), user_id=user_id)
        if song_id is not None:
            song.id = song_id
        return song


@router.get("", response_model=PaginatedResult[Song])
def list_songs(
    search: str | None = None,
    genre: str | None = None,
    tags: str | None = None,
    page_number: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> PaginatedResult[Song]:
    songs, total = service.get_songs(
        principal.user_id,
        search_term=search,
        genre=genre,
        tags=tags,
        page_number=page_number,
        page_size=page_size,
    )
    return PaginatedResult[Song](
        items=songs, page_number=page_number, page_size=page_size, total_count=total
    )


@router.get("/genres")
def list_genres(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> list[str]:
    return service.get_genres(principal.user_id)


@router.get("/artists")
def list_artists(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> list[str]:
    return service.get_artists(principal.user_id)


@router.get("/tags")
def list_tags(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> list[str]:
    return service.get_tags(principal.user_id)


@router.post("", response_model=Song, status_code=201)
def create_song(
    payload: SongInput,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> Song:
    """Create a song owned by the caller."""
    try:
        return service.create_song(payload.to_song(principal.user_id))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{song_id}", response_model=Song)
def get_song(
    song_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> Song:
    song = service.get_song(song_id, principal.user_id)
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found")
    return song


@router.put("/{song_id}", response_model=Song)
def update_song(
    song_id: str,
    payload: SongInput,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> Song:
    try:
        updated = service.update_song(payload.to_song(principal.user_id, song_id), principal.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Song not found")
    return updated


@router.delete("/{song_id}")
def delete_song(
    song_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SongService = Depends(get_song_service),
) -> dict[str, str]:
    if not service.delete_song(song_id, principal.user_id):
        raise HTTPException(status_code=404, detail="Song not found")
    return {"message": "Song deleted successfully"}
