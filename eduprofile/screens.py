"""
Screen handlers
===============

One handler per screen action of the mobile client. Each handler owns the
form state it receives, runs it through its ``ActionRunner`` and returns the
single notification the screen displays.

Screens:
    login           -> login()
    register        -> register()
    home            -> home(), logout()
    edit profile    -> edit_form(), save_profile(), change_password()
"""

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .actions import ActionRunner, Notification
from .errors import LOGIN_MESSAGES, PASSWORD_CHANGE_MESSAGES, REGISTER_MESSAGES
from .profile_sync import MSG_LOAD_FAILED, MSG_SAVE_FAILED, ProfileSynchronizer
from .session import SessionManager
from .validation import (
    validate_login_form,
    validate_password_form,
    validate_profile_form,
    validate_registration_form,
)

logger = logging.getLogger("eduprofile.screens")


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return "" if value is None else str(value)


class ScreenHandlers:
    def __init__(self, session: SessionManager, profiles: ProfileSynchronizer):
        self.session = session
        self.profiles = profiles

        self.login_action = ActionRunner(
            "login",
            success_message="Sesión iniciada correctamente",
            default_error="Error al iniciar sesión",
            auth_messages=LOGIN_MESSAGES,
        )
        self.register_action = ActionRunner(
            "register",
            success_message="Usuario registrado correctamente",
            default_error="Error al registrar usuario",
            auth_messages=REGISTER_MESSAGES,
            success_title="Éxito",
        )
        self.logout_action = ActionRunner(
            "logout",
            success_message="Sesión cerrada",
            default_error="No se pudo cerrar sesión",
        )
        self.load_profile_action = ActionRunner(
            "load_profile",
            success_message="Perfil cargado",
            default_error=MSG_LOAD_FAILED,
        )
        self.edit_form_action = ActionRunner(
            "edit_form",
            success_message="Perfil cargado",
            default_error=MSG_LOAD_FAILED,
        )
        self.save_profile_action = ActionRunner(
            "save_profile",
            success_message="Tu perfil ha sido actualizado correctamente",
            default_error=MSG_SAVE_FAILED,
        )
        self.change_password_action = ActionRunner(
            "change_password",
            success_message="Tu contraseña ha sido actualizada correctamente",
            default_error="Error al cambiar la contraseña",
            auth_messages=PASSWORD_CHANGE_MESSAGES,
        )

    async def login(self, form: Mapping[str, Any]) -> Notification:
        email, password = _text(form, "email"), _text(form, "password")

        async def submit():
            identity = await self.session.sign_in(email, password)
            return identity.public()

        return await self.login_action.run(submit, validate=lambda: validate_login_form(form))

    async def register(self, form: Mapping[str, Any]) -> Notification:
        async def submit():
            identity = await self.session.sign_up(
                _text(form, "name"),
                _text(form, "email"),
                _text(form, "password"),
                _text(form, "degree"),
                _text(form, "graduationYear"),
            )
            return identity.public()

        return await self.register_action.run(submit, validate=lambda: validate_registration_form(form))

    async def logout(self) -> Notification:
        async def submit():
            await self.session.sign_out()
            return None

        return await self.logout_action.run(submit)

    async def home(self, now: Optional[datetime] = None) -> Notification:
        async def submit():
            identity = self.session.context.require_identity()
            profile = await self.profiles.load_profile(identity)
            return profile.to_view(now)

        return await self.load_profile_action.run(submit)

    async def edit_form(self) -> Notification:
        async def submit():
            identity = self.session.context.require_identity()
            profile = await self.profiles.load_profile(identity)
            return self.profiles.edit_form(profile)

        return await self.edit_form_action.run(submit)

    async def save_profile(self, form: Mapping[str, Any]) -> Notification:
        patch: Dict[str, str] = {
            "name": _text(form, "name"),
            "degree": _text(form, "degree"),
            "graduationYear": _text(form, "graduationYear"),
        }

        async def submit():
            identity = self.session.context.require_identity()
            return await self.profiles.save_profile(identity, patch)

        return await self.save_profile_action.run(submit, validate=lambda: validate_profile_form(patch))

    async def change_password(self, form: Mapping[str, Any]) -> Notification:
        async def submit():
            await self.session.change_password(
                _text(form, "currentPassword"),
                _text(form, "newPassword"),
                _text(form, "confirmPassword"),
            )
            return None

        return await self.change_password_action.run(submit, validate=lambda: validate_password_form(form))
