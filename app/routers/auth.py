from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.dependencies import SESSION_COOKIE, SESSION_MAX_AGE, create_session_token, current_user_id
from kitchen_ledger.core import auth as auth_core, dashboard as dashboard_core, ledger

router = APIRouter(tags=["auth"])
templates = Jinja2Templates(directory=Path(__file__).parent.parent / "templates")


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, user_id: int = Depends(current_user_id)):
    summary = dashboard_core.summarize(ledger.get_user_data(user_id))
    return templates.TemplateResponse(request, "home.html", {
        "email": auth_core.get_email(user_id),
        "summary": summary,
    })


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html")


@router.post("/login")
async def login(request: Request, username: str = Form(""), password: str = Form("")):
    try:
        user_id = auth_core.authenticate(username, password)
    except auth_core.AuthenticationError as e:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": str(e), "username": username},
            status_code=200,
        )
    resp = RedirectResponse(url="/", status_code=302)
    resp.set_cookie(
        SESSION_COOKIE,
        create_session_token(user_id),
        httponly=True,
        samesite="lax",
        max_age=SESSION_MAX_AGE,
    )
    return resp


@router.post("/logout")
async def logout():
    resp = RedirectResponse(url="/login", status_code=302)
    resp.delete_cookie(SESSION_COOKIE)
    return resp
