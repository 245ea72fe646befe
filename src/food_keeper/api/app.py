"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from food_keeper.api.food_items import item_json
from food_keeper.api.food_items import router as food_items_router
from food_keeper.api.guards import redirect_url, require_admission
from food_keeper.api.models import EmailBody, OtpBody, ResetPasswordBody
from food_keeper.app_logging import configure_logging
from food_keeper.containers import AppContainer
from food_keeper.domain.auth import (
    AuthResult,
    EmailVerification,
    LoginCredentials,
    PasswordReset,
    RegistrationData,
    UserProfile,
)
from food_keeper.domain.food_items import FilterTab
from food_keeper.domain.navigation import DASHBOARD_PATH, LOGIN_PATH, Redirect
from food_keeper.errors import SessionExpiredError, first_error_message
from food_keeper.services.filters import FilteredView


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.session_store.initialize()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(food_items_router)

    @app.exception_handler(SessionExpiredError)
    async def session_expired(
        request: Request, exc: SessionExpiredError
    ) -> RedirectResponse:
        """Send the user back to login after the backend rejected the token."""
        state_container: AppContainer = request.app.state.container
        logger.info("Session expired", extra={"path": exc.path})
        state_container.food_items.reset()
        state_container.banners.clear()
        return _redirect(Redirect(LOGIN_PATH))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def index() -> RedirectResponse:
        """Default route."""
        return _redirect(Redirect(DASHBOARD_PATH))

    @app.get("/login")
    async def login_view(
        request: Request, error: str | None = None
    ) -> dict[str, object]:
        """Login entry point."""
        state_container: AppContainer = request.app.state.container
        return {
            "error": error,
            "authenticated": state_container.session_store.is_authenticated,
            "oauth_url": state_container.settings.oauth_authorize_url,
        }

    @app.post("/login")
    async def login(credentials: LoginCredentials, request: Request) -> JSONResponse:
        """Sign in with email and password."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.session_store.login(credentials)
        if not result.success:
            return _result_response(result)
        state_container.food_items.reset()
        return JSONResponse(
            content={"user": _user_json(state_container.session_store.user)}
        )

    @app.post("/logout")
    async def logout(request: Request) -> RedirectResponse:
        """Sign out locally."""
        state_container: AppContainer = request.app.state.container
        state_container.session_store.logout()
        state_container.food_items.reset()
        state_container.banners.clear()
        return _redirect(Redirect(LOGIN_PATH))

    @app.post("/register")
    async def register(data: RegistrationData, request: Request) -> JSONResponse:
        """Create an account; the user verifies the email next."""
        state_container: AppContainer = request.app.state.container
        return _result_response(await state_container.session_store.register(data))

    @app.post("/verify-email")
    async def verify_email(body: OtpBody, request: Request) -> JSONResponse:
        """Confirm the email address with an OTP."""
        state_container: AppContainer = request.app.state.container
        try:
            verification = EmailVerification(email=body.email, otp=body.otp)
        except ValidationError as exc:
            return _error_response(first_error_message(exc))
        return _result_response(
            await state_container.session_store.verify_email(verification)
        )

    @app.post("/resend-verification")
    async def resend_verification(body: EmailBody, request: Request) -> JSONResponse:
        """Send a fresh verification OTP."""
        state_container: AppContainer = request.app.state.container
        return _result_response(
            await state_container.session_store.resend_verification(body.email)
        )

    @app.post("/forgot-password")
    async def forgot_password(body: EmailBody, request: Request) -> JSONResponse:
        """Send a password reset OTP."""
        state_container: AppContainer = request.app.state.container
        return _result_response(
            await state_container.session_store.forgot_password(body.email)
        )

    @app.post("/reset-password")
    async def reset_password(body: ResetPasswordBody, request: Request) -> JSONResponse:
        """Set a new password with a reset OTP."""
        state_container: AppContainer = request.app.state.container
        try:
            reset = PasswordReset(
                email=body.email,
                otp=body.otp,
                new_password=body.new_password,
                confirm_password=body.confirm_password,
            )
        except ValidationError as exc:
            return _error_response(first_error_message(exc))
        return _result_response(
            await state_container.session_store.reset_password(reset)
        )

    @app.get("/oauth2/redirect")
    async def oauth2_redirect(request: Request) -> RedirectResponse:
        """Finish the OAuth2 login started from the login view."""
        state_container: AppContainer = request.app.state.container
        redirect = await state_container.oauth_handler.complete(request.query_params)
        if redirect.path == DASHBOARD_PATH:
            state_container.food_items.reset()
        return _redirect(redirect)

    @app.get("/dashboard", dependencies=[Depends(require_admission)])
    async def dashboard(
        request: Request,
        search: str = "",
        tab: FilterTab = FilterTab.ALL,
        refresh: bool = False,
    ) -> dict[str, object]:
        """Signed-in home: profile header, stats, filters and the item list."""
        state_container: AppContainer = request.app.state.container
        food_items = state_container.food_items
        if refresh or not food_items.loaded:
            await food_items.load()
        food_items.set_search_term(search)
        view = food_items.set_tab(tab)
        banners = state_container.banners
        return {
            "user": _user_json(state_container.session_store.user),
            **_view_json(view),
            "success": banners.success_text,
            "error": banners.error_text or food_items.error,
        }

    return app


def _redirect(redirect: Redirect) -> RedirectResponse:
    return RedirectResponse(
        url=redirect_url(redirect), status_code=status.HTTP_303_SEE_OTHER
    )


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message},
    )


def _result_response(result: AuthResult) -> JSONResponse:
    """Render an Auth Service result."""
    if not result.success:
        return _error_response(result.error or "Request failed")
    return JSONResponse(content={"success": True, "data": result.data})


def _user_json(user: UserProfile | None) -> dict[str, object] | None:
    """Profile header data for the dashboard."""
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name or "User",
        "initial": (user.first_name or "U")[:1],
        "profilePicture": user.profile_picture,
        "emailVerified": user.email_verified,
    }


def _view_json(view: FilteredView) -> dict[str, object]:
    """Serialize the filtered list with its tab counts and total calories."""
    return {
        "search": view.search_term,
        "tab": view.active_tab.value,
        "counts": {
            "all": view.counts.all,
            "recent": view.counts.recent,
            "consumed": view.counts.consumed,
            "with-calories": view.counts.with_calories,
        },
        "filteredCount": len(view.items),
        "totalCalories": view.total_calories,
        "items": [item_json(item) for item in view.items],
    }
