import logging
import time

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .services.currency import CurrencyService
from .store import Ledger, LedgerState, demo_state
from .routers import currencies, dashboard, expenses, export, health, wallets


def create_app(
    settings_override: Settings | None = None, state: LedgerState | None = None
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    state: initial ledger contents; defaults to the demo data when
    `seed_demo_data` is on, otherwise an empty ledger.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    if state is None:
        state = demo_state() if settings.seed_demo_data else LedgerState()

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )

    # Application-owned state container
    app.state.settings = settings
    app.state.ledger = Ledger(state)
    app.state.currency_service = CurrencyService.from_settings(settings)
    app.state.started_at = time.monotonic()

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(expenses.router)
    app.include_router(wallets.router)
    app.include_router(dashboard.router)
    app.include_router(currencies.router)
    app.include_router(currencies.categories_router)
    app.include_router(export.router)

    @app.get("/")
    async def root():
        return {"message": "Expense Tracker API", "version": settings.version}

    logging.getLogger("expense_tracker").info(
        "app ready: %d wallet(s), %d expense(s), base %s",
        len(state.wallets),
        len(state.expenses),
        settings.base_currency,
    )
    return app


app = create_app()
