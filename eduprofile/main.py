from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional, Union
import logging
import time

from .actions import Notification
from .config import get_settings
from .errors import NO_CURRENT_USER, ActionInProgressError
from .logging_setup import configure_logging
from .services import Services, build_services

configure_logging()
logger = logging.getLogger("eduprofile.app")

START_TIME = time.time()


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""


class RegisterForm(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    degree: str = ""
    graduationYear: Union[str, int] = ""


class ProfileForm(BaseModel):
    name: str = ""
    degree: str = ""
    graduationYear: Union[str, int] = ""


class PasswordForm(BaseModel):
    currentPassword: str = ""
    newPassword: str = ""
    confirmPassword: str = ""


def _respond(notification: Notification) -> JSONResponse:
    status_code = 401 if notification.error_code == NO_CURRENT_USER else 200
    return JSONResponse(notification.to_dict(), status_code=status_code)


def create_app(services: Optional[Services] = None) -> FastAPI:
    settings = services.settings if services else get_settings()
    app = FastAPI(title="eduprofile")
    app.state.services = services

    logger.info("service_start version=%s", settings.service_version)

    @app.on_event("startup")
    def on_startup():
        if app.state.services is None:
            app.state.services = build_services(settings)
            logger.info("services status=started")

    @app.exception_handler(ActionInProgressError)
    async def on_action_in_progress(request: Request, exc: ActionInProgressError):
        return JSONResponse(
            {"success": False, "title": "Error", "message": exc.message, "code": "action-in-progress"},
            status_code=409,
        )

    def screens(request: Request):
        return request.app.state.services.screens

    @app.get("/healthz")
    def healthz(request: Request):
        services = request.app.state.services
        return {
            "status": "ok",
            "version": settings.service_version,
            "authenticated": bool(services and services.context.is_authenticated),
            "uptime_s": int(time.time() - START_TIME),
        }

    @app.get("/version")
    def version():
        return {"version": settings.service_version}

    @app.post("/auth/login")
    async def login(form: LoginForm, request: Request):
        return _respond(await screens(request).login(form.model_dump()))

    @app.post("/auth/register")
    async def register(form: RegisterForm, request: Request):
        return _respond(await screens(request).register(form.model_dump()))

    @app.post("/auth/logout")
    async def logout(request: Request):
        return _respond(await screens(request).logout())

    @app.post("/auth/password")
    async def change_password(form: PasswordForm, request: Request):
        return _respond(await screens(request).change_password(form.model_dump()))

    @app.get("/profile")
    async def home(request: Request):
        return _respond(await screens(request).home())

    @app.get("/profile/form")
    async def edit_form(request: Request):
        return _respond(await screens(request).edit_form())

    @app.put("/profile")
    async def save_profile(form: ProfileForm, request: Request):
        return _respond(await screens(request).save_profile(form.model_dump()))

    return app


app = create_app()
