from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from heroshot.assembly.render import canvas_size, export_cover_png
from heroshot.config import settings
from heroshot.datauri import to_data_uri
from heroshot.editor.actions import Action, ActionType
from heroshot.editor.intents import EditResult
from heroshot.editor.session import CoverSession
from heroshot.editor.state import AspectRatio, ThemeMode, ToolMode, ViralLayout, state_to_public_dict
from heroshot.errors import (
    ExportError,
    GenerationBusyError,
    GenerationError,
    HeroShotError,
    MissingCredentialError,
)
from heroshot.logger import get_logger

log = get_logger(__name__)

app = FastAPI(title="HeroShot cover editor")

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

# One editing session per process; the key may be pre-seeded from GEMINI_API_KEY.
session = CoverSession(api_key=settings.gemini_api_key)

ASSET_ACTIONS = {
    "subject": ActionType.SET_SUBJECT_IMAGE,
    "reference": ActionType.SET_REFERENCE_IMAGE,
}


def _to_http_error(exc: HeroShotError) -> HTTPException:
    if isinstance(exc, MissingCredentialError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, GenerationBusyError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, GenerationError):
        return HTTPException(status_code=502, detail="Generation failed, check the API key or network.")
    return HTTPException(status_code=500, detail="Unexpected editor error")


def _edit_result_dict(result: EditResult) -> dict[str, Any]:
    out: dict[str, Any] = {"action": result.action}
    updates = {k: v for k, v in vars(result).items() if k != "action" and v is not None}
    if updates:
        out["updates"] = updates
    return out


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    if not session.has_api_key:
        return templates.TemplateResponse(request=request, name="key.html", context={})
    state = session.state
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={
            "state": state,
            "view": state_to_public_dict(state),
            "canvas_size": canvas_size(state.aspect_ratio),
            "aspect_ratios": list(AspectRatio),
            "tool_modes": list(ToolMode),
            "theme_modes": list(ThemeMode),
            "viral_layouts": list(ViralLayout),
        },
    )


@app.post("/key")
def set_api_key(api_key: str = Form("")):
    if not api_key.strip():
        raise HTTPException(status_code=400, detail="api_key is required")
    session.set_api_key(api_key)
    log.info("API key set for this session")
    return RedirectResponse(url="/", status_code=303)


@app.get("/state")
def get_state():
    return state_to_public_dict(session.state)


@app.post("/actions")
def dispatch_action(payload: dict[str, Any] = Body(...)):
    kind = payload.get("type")
    if not isinstance(kind, str) or not kind:
        raise HTTPException(status_code=400, detail="type is required")
    session.dispatch(Action(kind, payload.get("payload")))
    return state_to_public_dict(session.state)


@app.post("/styles")
def add_style(label: str = Form(""), prompt: str = Form("")):
    if not label.strip() or not prompt.strip():
        raise HTTPException(status_code=400, detail="label and prompt are required")
    session.dispatch(Action(ActionType.ADD_STYLE, {"label": label.strip(), "prompt": prompt.strip()}))
    return RedirectResponse(url="/", status_code=303)


@app.post("/styles/{style_id}/delete")
def delete_style(style_id: str):
    if len(session.state.styles) <= 1:
        raise HTTPException(status_code=400, detail="cannot delete the last style")
    session.dispatch(Action(ActionType.DELETE_STYLE, style_id))
    return RedirectResponse(url="/", status_code=303)


@app.post("/assets/{kind}")
async def upload_asset(kind: str, file: UploadFile = File(...)):
    action = ASSET_ACTIONS.get(kind)
    if action is None:
        raise HTTPException(status_code=404, detail="unknown asset kind")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="empty upload")
    mime = file.content_type or "image/png"
    if not mime.startswith("image/"):
        raise HTTPException(status_code=400, detail="upload must be an image")
    session.dispatch(Action(action, to_data_uri(content, mime)))
    return RedirectResponse(url="/", status_code=303)


@app.post("/generate")
async def generate():
    try:
        await session.generate()
    except HeroShotError as exc:
        raise _to_http_error(exc) from exc
    return RedirectResponse(url="/", status_code=303)


@app.post("/polish")
async def polish():
    try:
        await session.polish_title()
    except HeroShotError as exc:
        raise _to_http_error(exc) from exc
    return RedirectResponse(url="/", status_code=303)


@app.post("/magic-edit")
async def magic_edit(command: str = Form("")):
    try:
        result = await session.magic_edit(command)
    except HeroShotError as exc:
        raise _to_http_error(exc) from exc
    return JSONResponse({"result": _edit_result_dict(result), "state": state_to_public_dict(session.state)})


@app.get("/export")
def export_png():
    try:
        exported = session.export()
    except ExportError as exc:
        status = 400 if not session.state.generated_image else 500
        log.warning("Export refused or failed: %s", exc)
        raise HTTPException(status_code=status, detail=str(exc)) from exc
    return Response(
        content=exported.data,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@app.get("/preview.png")
def preview_png():
    # Same compositor as the export, at on-screen size and with or without a background.
    try:
        rendered = export_cover_png(session.state, scale=1)
    except ExportError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return Response(content=rendered.data, media_type="image/png", headers={"Cache-Control": "no-store"})
