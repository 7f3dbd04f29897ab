"""Admin authentication routes."""
from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from ..config import COOKIE_SECURE, ROOT_PATH, SESSION_COOKIE, SESSION_MAX_AGE
from ..dependencies import get_current_user
from ..infrastructure.backend import open_backend
from ..templating import render
from ..toasts import push_toast
from .deps import get_auth_service

router = APIRouter()


@router.get("/admin/login")
def login_page(request: Request):
    """Show login page."""
    # If already logged in, go to the dashboard
    if get_current_user(request):
        return RedirectResponse(url=f"{ROOT_PATH}/admin", status_code=302)

    return render(request, "admin_login.html", {"email": ""})


@router.post("/admin/login")
def login(request: Request, email: str = Form(""), password: str = Form("")):
    """Process login form."""
    with open_backend() as db:
        try:
            session = get_auth_service(db).login(email, password)
        except HTTPException as e:
            return render(
                request, "admin_login.html", {"email": email},
                status_code=e.status_code, errors=[e.detail]
            )

    response = RedirectResponse(url=f"{ROOT_PATH}/admin", status_code=303)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session["token"],
        httponly=True,
        samesite="lax",
        secure=COOKIE_SECURE,
        max_age=SESSION_MAX_AGE
    )
    push_toast(request, response, "Login berhasil!", "success")
    return response


@router.post("/admin/logout")
def logout(request: Request):
    """Logout admin."""
    token = request.cookies.get(SESSION_COOKIE)

    with open_backend() as db:
        try:
            get_auth_service(db).logout(token)
        except HTTPException as e:
            response = RedirectResponse(url=f"{ROOT_PATH}/admin", status_code=303)
            push_toast(request, response, e.detail, "error")
            return response

    response = RedirectResponse(url=f"{ROOT_PATH}/admin/login", status_code=303)
    response.delete_cookie(SESSION_COOKIE)
    push_toast(request, response, "Anda berhasil logout.", "success")
    return response
