"""Entorno de pruebas: se fija antes de importar la app para que la lea al arrancar."""

import os
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STREAM_DELAY_MS"] = "0"
os.environ["EXECUTION_DELAY_SCALE"] = "0"
os.environ["LOOKUP_USERNAME"] = "admin"
os.environ["LOOKUP_PASSWORD"] = "admin123"
for key in ("NUMVERIFY_KEY", "CLEARBIT_KEY", "IPSTACK_KEY", "REDIS_URL", "OTEL_EXPORTER_OTLP_ENDPOINT"):
    os.environ.pop(key, None)
