"""FastAPI server exposing the wardrobe and outfit generation endpoints."""

from dataclasses import asdict
from datetime import date as dt_date
from typing import Optional

from fastapi import FastAPI, HTTPException, Query

from logic.outfit_builder import (
    STATUS_INSUFFICIENT_ITEMS,
    STATUS_NO_MATCHING_ITEMS,
    STATUS_NO_NEW_COMBINATIONS,
)
from logic.validation import (
    AnalyzeItemRequest,
    GenerateOutfitRequest,
    GenerateOutfitResponse,
    ItemCreateRequest,
    ItemUpdateRequest,
    OccasionCreateRequest,
    ProfileRequest,
    ProfileUpdateRequest,
    SaveOutfitRequest,
    SegmentChangeRequest,
    SessionRequest,
    UploadItemRequest,
)
from memory.generation_sessions import UnknownSessionError
from models.taxonomy import FilterMode, validate_segment
from stylist_app.app import StylistApp
from stylist_app.logging_config import configure_logging

configure_logging()

STATUS_CODES = {
    STATUS_NO_MATCHING_ITEMS: 422,
    STATUS_INSUFFICIENT_ITEMS: 422,
    STATUS_NO_NEW_COMBINATIONS: 409,
}
STATUS_MESSAGES = {
    STATUS_NO_MATCHING_ITEMS: "No items match the selected segment",
    STATUS_INSUFFICIENT_ITEMS: "Need at least one top and one bottom to generate an outfit",
    STATUS_NO_NEW_COMBINATIONS: "No new combinations left, refresh the session to start over",
}


def create_app(stylist: StylistApp | None = None) -> FastAPI:
    """Build the API around ``stylist`` (a default service when omitted)."""

    stylist = stylist or StylistApp()
    api = FastAPI(title="Wardrobe Stylist", version="0.1.0")
    api.state.stylist = stylist

    def _segment(value: Optional[str]):
        try:
            return validate_segment(value)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    def _session_or_404(call, *args):
        try:
            return call(*args)
        except UnknownSessionError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown session {exc.args[0]}") from exc

    @api.get("/healthz")
    async def healthcheck() -> dict:
        return {
            "status": "ok",
            "service": "wardrobe-stylist",
            "environment": stylist.config.environment or "local",
            "vision_model": stylist.config.vision_model,
            "vision_enabled": stylist.vision_client is not None,
        }

    @api.post("/items/analyze")
    def analyze_item(request: AnalyzeItemRequest) -> dict:
        analysis = stylist.analyze_item(request.image_url, filename=request.filename, use_vision=request.use_vision)
        return analysis.model_dump()

    @api.post("/items", status_code=201)
    def create_item(request: ItemCreateRequest) -> dict:
        payload = request.model_dump(exclude={"user_id", "category", "image_url", "item_id"})
        try:
            item = stylist.add_item(
                request.user_id, request.category, image_url=request.image_url, item_id=request.item_id, **payload
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return asdict(item)

    @api.post("/items/upload", status_code=201)
    def upload_item(request: UploadItemRequest) -> dict:
        item, analysis = stylist.add_item_from_image(
            request.user_id, request.image_url, filename=request.filename, use_vision=request.use_vision
        )
        return {"item": asdict(item), "analysis": analysis.model_dump()}

    @api.get("/items")
    def list_items(user_id: str, segment: Optional[str] = None) -> dict:
        items = stylist.list_items(user_id, _segment(segment))
        return {"items": [asdict(item) for item in items], "count": len(items)}

    @api.patch("/items/{item_id}")
    def update_item(item_id: str, request: ItemUpdateRequest) -> dict:
        try:
            item = stylist.update_item(request.user_id, item_id, request.model_dump(exclude={"user_id"}))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if item is None:
            raise HTTPException(status_code=404, detail=f"Unknown item {item_id}")
        return asdict(item)

    @api.delete("/items/{item_id}")
    def delete_item(item_id: str, user_id: str) -> dict:
        if not stylist.delete_item(user_id, item_id):
            raise HTTPException(status_code=404, detail=f"Unknown item {item_id}")
        return {"status": "deleted", "item_id": item_id}

    @api.get("/wardrobe/stats")
    def wardrobe_stats(user_id: str, segment: Optional[str] = None, mode: FilterMode = FilterMode.STRICT) -> dict:
        return stylist.wardrobe_stats(user_id, _segment(segment), mode)

    @api.get("/occasions")
    def list_occasions(user_id: str, day: Optional[dt_date] = Query(default=None, alias="date")) -> dict:
        occasions = stylist.list_occasions(user_id, day)
        return {"occasions": [asdict(occasion) for occasion in occasions]}

    @api.post("/occasions", status_code=201)
    def create_occasion(request: OccasionCreateRequest) -> dict:
        occasion = stylist.create_occasion(
            request.user_id,
            request.title,
            request.date,
            occasion=request.occasion,
            description=request.description,
            dress_code=request.dress_code,
        )
        return asdict(occasion)

    @api.get("/profiles/{user_id}")
    def get_profile(user_id: str) -> dict:
        profile = stylist.get_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail=f"Unknown profile {user_id}")
        return profile.to_dict()

    @api.put("/profiles/{user_id}")
    def upsert_profile(user_id: str, request: ProfileRequest) -> dict:
        try:
            profile = stylist.upsert_profile(user_id, **request.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return profile.to_dict()

    @api.patch("/profiles/{user_id}")
    def update_profile(user_id: str, request: ProfileUpdateRequest) -> dict:
        try:
            profile = stylist.update_profile(user_id, request.model_dump(exclude_none=True))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if profile is None:
            raise HTTPException(status_code=404, detail=f"Unknown profile {user_id}")
        return profile.to_dict()

    @api.post("/sessions", status_code=201)
    def create_session(request: SessionRequest) -> dict:
        segment = _segment(request.segment) if request.segment is not None else None
        return asdict(stylist.start_session(request.user_id, segment))

    @api.put("/sessions/{session_id}/segment")
    def change_segment(session_id: str, request: SegmentChangeRequest) -> dict:
        return asdict(_session_or_404(stylist.change_segment, session_id, _segment(request.segment)))

    @api.post("/sessions/{session_id}/refresh")
    def refresh_session(session_id: str) -> dict:
        return asdict(_session_or_404(stylist.refresh_session, session_id))

    @api.post("/outfits/generate")
    def generate(request: GenerateOutfitRequest) -> dict:
        result = _session_or_404(
            stylist.generate_outfit, request.user_id, request.session_id, request.occasion_id, request.day
        )
        if not result.ok:
            raise HTTPException(
                status_code=STATUS_CODES.get(result.status, 400),
                detail={"status": result.status, "message": STATUS_MESSAGES.get(result.status, result.status)},
            )
        response = GenerateOutfitResponse(
            status=result.status,
            outfit=result.outfit.to_dict() if result.outfit else None,
            analysis=result.analysis,
            history_size=int(result.diagnostics.get("history_size", 0)),
            diagnostics=dict(result.diagnostics),
        )
        return response.model_dump()

    @api.post("/outfits/saved", status_code=201)
    def save_outfit(request: SaveOutfitRequest) -> dict:
        try:
            saved = stylist.save_outfit(request.user_id, request.outfit)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return saved.to_dict()

    @api.get("/outfits/saved")
    def list_saved(user_id: str) -> dict:
        return {"outfits": [outfit.to_dict() for outfit in stylist.list_saved(user_id)]}

    @api.delete("/outfits/saved/{outfit_id}")
    def delete_saved(outfit_id: str, user_id: str) -> dict:
        if not stylist.delete_saved(user_id, outfit_id):
            raise HTTPException(status_code=404, detail=f"Unknown outfit {outfit_id}")
        return {"status": "deleted", "outfit_id": outfit_id}

    return api


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
