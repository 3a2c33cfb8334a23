import importlib
import importlib.util
import logging
import os
import sys
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Gauge, Histogram


logger = logging.getLogger(__name__)

REQUEST_LOG_LIMIT = 80


LOOKUP_COUNTER = Counter(
    "hackeride_osint_lookups_total",
    "Búsquedas OSINT resueltas por tipo de consulta y resultado.",
    ["query_type", "success"],
)

EXECUTION_COUNTER = Counter(
    "hackeride_executions_total",
    "Ejecuciones simuladas terminadas por estado final.",
    ["status"],
)

TERMINAL_CONNECTIONS = Gauge(
    "hackeride_terminal_connections",
    "Conexiones WebSocket de terminal abiertas.",
)

API_LATENCY = Histogram(
    "hackeride_api_latency_seconds",
    "Latencia por handler FastAPI.",
    ["method", "path", "status_code"],
    buckets=(
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)


def configure_logging(level: str = "INFO") -> None:
    """Configura el logger raíz con formato de consola y marca de tiempo."""

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)


class Observability:
    """Configura latencias, log de peticiones y tracing opcional."""

    def __init__(self, app: FastAPI):
        self.app = app
        self._attach_latency_middleware()
        self._configure_tracing()

    def _configure_tracing(self) -> None:
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        if not endpoint:
            return

        if importlib.util.find_spec("opentelemetry.sdk.trace") is None:
            logger.warning("OTEL_EXPORTER_OTLP_ENDPOINT definido pero el SDK de OpenTelemetry no está instalado")
            return

        trace_mod = importlib.import_module("opentelemetry.trace")
        exporter_mod = importlib.import_module(
            "opentelemetry.exporter.otlp.proto.http.trace_exporter"
        )
        resources_mod = importlib.import_module("opentelemetry.sdk.resources")
        sdk_trace = importlib.import_module("opentelemetry.sdk.trace")
        sdk_export = importlib.import_module("opentelemetry.sdk.trace.export")
        fastapi_inst = importlib.import_module("opentelemetry.instrumentation.fastapi")

        resource = resources_mod.Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "hackeride-api"),
                "service.instance.id": os.getenv("HOSTNAME", "local"),
            }
        )

        provider = sdk_trace.TracerProvider(resource=resource)
        span_exporter = exporter_mod.OTLPSpanExporter(
            endpoint=endpoint,
            timeout=int(os.getenv("OTEL_EXPORTER_OTLP_TIMEOUT", "10")),
        )
        provider.add_span_processor(sdk_export.BatchSpanProcessor(span_exporter))
        trace_mod.set_tracer_provider(provider)
        fastapi_inst.FastAPIInstrumentor.instrument_app(
            self.app, tracer_provider=provider
        )

    def _attach_latency_middleware(self) -> None:
        @self.app.middleware("http")
        async def record_latency(request: Request, call_next):  # type: ignore[arg-type]
            start = time.perf_counter()
            response = await call_next(request)
            elapsed = time.perf_counter() - start

            route_template = request.url.path
            route = request.scope.get("route")
            if route and getattr(route, "path", None):
                route_template = route.path

            API_LATENCY.labels(
                method=request.method,
                path=route_template,
                status_code=str(response.status_code),
            ).observe(elapsed)

            if request.url.path.startswith("/api"):
                logger.info(
                    format_request_line(request.method, request.url.path, response.status_code, elapsed)
                )
            return response


def format_request_line(method: str, path: str, status_code: int, elapsed: float) -> str:
    """Línea de log compacta ``METHOD path status in Nms`` (máx. 80 caracteres)."""

    line = f"{method} {path} {status_code} in {int(elapsed * 1000)}ms"
    if len(line) > REQUEST_LOG_LIMIT:
        line = line[: REQUEST_LOG_LIMIT - 1] + "…"
    return line


def record_lookup(query_type: str, success: bool) -> None:
    LOOKUP_COUNTER.labels(query_type=query_type, success=str(success).lower()).inc()


def record_execution(status: str) -> None:
    EXECUTION_COUNTER.labels(status=status).inc()
