"""Configuración de la aplicación leída desde variables de entorno.

Todas las piezas (almacén, proveedores OSINT, ejecutor simulado, stream SSE)
toman sus valores de aquí para que un despliegue solo tenga que inyectar
variables de entorno.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


DEMO_KEY = "demo_key"


@dataclass
class AppSettings:
    """Valores de configuración con los defaults del entorno de demo."""

    database_url: str = "sqlite://"
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    stream_delay_ms: int = 800
    execution_delay_scale: float = 1.0
    lookup_username: str = "admin"
    lookup_password: str = "admin123"
    numverify_key: str = DEMO_KEY
    clearbit_key: str = DEMO_KEY
    ipstack_key: str = DEMO_KEY
    lookup_timeout: float = 10.0
    redis_url: str | None = None

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite://"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=_load_list("CORS_ORIGINS", fallback="*"),
            stream_delay_ms=int(os.getenv("STREAM_DELAY_MS", "800")),
            execution_delay_scale=float(os.getenv("EXECUTION_DELAY_SCALE", "1.0")),
            lookup_username=os.getenv("LOOKUP_USERNAME", "admin"),
            lookup_password=os.getenv("LOOKUP_PASSWORD", "admin123"),
            numverify_key=os.getenv("NUMVERIFY_KEY", DEMO_KEY),
            clearbit_key=os.getenv("CLEARBIT_KEY", DEMO_KEY),
            ipstack_key=os.getenv("IPSTACK_KEY", DEMO_KEY),
            lookup_timeout=float(os.getenv("LOOKUP_TIMEOUT", "10")),
            redis_url=os.getenv("REDIS_URL") or None,
        )

    @property
    def stream_delay_seconds(self) -> float:
        return max(self.stream_delay_ms, 0) / 1000


def _load_list(env_var: str, fallback: str) -> list[str]:
    raw = os.getenv(env_var) or fallback
    return [piece.strip() for piece in raw.split(",") if piece.strip()]
