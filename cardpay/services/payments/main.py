"""Public entrypoint for card payment intake.

Builds the pipeline once at startup. A missing tokenization secret raises
`ConfigurationError` here, before the app can serve a single request.
"""

from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cardpay.common.config import CommonSettings, settings
from cardpay.common.db import SessionLocal
from cardpay.common.logging import configure_logging, logger, trace_id_ctx
from cardpay.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
    payment_latency_seconds,
    payment_requests_total,
)
from cardpay.common.startup import log_startup_config
from cardpay.common.tracing import instrument_app, setup_tracing
from cardpay.services.authorizer.service import PaymentAuthorizer, SimulatedAuthorizer
from cardpay.services.ledger.service import TransactionLedger
from cardpay.services.payments.schemas import PaymentRequest, PaymentResponse
from cardpay.services.payments.service import SENTINEL_TRANSACTION_ID, PaymentService
from cardpay.services.payments.tokenizer import CardTokenizer


def build_payment_service(
    config: CommonSettings,
    session_factory,
    authorizer: PaymentAuthorizer | None = None,
) -> PaymentService:
    """Wire tokenizer, authorizer and ledger into one pipeline."""

    secret = config.secret_key.get_secret_value() if config.secret_key is not None else None
    ledger = TransactionLedger(
        session_factory,
        service_name=config.service_name,
        connect_retries=config.db_connect_retries,
    )
    return PaymentService(
        CardTokenizer(secret),
        authorizer or SimulatedAuthorizer(service_name=config.service_name),
        ledger,
        service_name=config.service_name,
    )


def create_app(
    config: CommonSettings = settings,
    session_factory=SessionLocal,
    authorizer: PaymentAuthorizer | None = None,
) -> FastAPI:
    """Build the FastAPI app around a fully wired payment pipeline."""

    log_startup_config(
        config,
        ["service_name", "log_level", "postgres_dsn", "secret_key", "db_connect_retries", "tracing_enabled"],
    )
    service = build_payment_service(config, session_factory, authorizer)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        """Refuse to serve until the database answers."""

        service.ledger.ensure_ready()
        yield

    app = FastAPI(title="CardPay Payment Intake", lifespan=lifespan)
    app.state.payment_service = service
    instrument_app(app)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Record request count and latency for every HTTP call."""

        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=config.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=config.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.exception_handler(RequestValidationError)
    async def invalid_payload(_: Request, exc: RequestValidationError):
        """Malformed JSON or missing fields: 400 without touching the pipeline."""

        logger.info("invalid request payload errors=%s", len(exc.errors()))
        body = PaymentResponse(message="Invalid request payload", transaction_id=SENTINEL_TRANSACTION_ID)
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.post("/api/payments", response_model=PaymentResponse)
    def create_payment(
        req: PaymentRequest,
        response: Response,
        x_correlation_id: str | None = Header(default=None),
    ):
        """Validate, tokenize, authorize and record one card payment."""

        trace_id_ctx.set(x_correlation_id or str(uuid4()))
        payment_requests_total.labels(service=config.service_name).inc()
        with payment_latency_seconds.labels(service=config.service_name).time():
            outcome = service.process(req)
        response.status_code = outcome.status_code
        return PaymentResponse(message=outcome.message, transaction_id=outcome.transaction_id)

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    @app.get("/health")
    def health():
        """Container health check endpoint."""

        return {"ok": True}

    return app


configure_logging()
setup_tracing(settings.service_name)
app = create_app()
