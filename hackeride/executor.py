"""
Ejecución simulada de proyectos.

No se compila ni se ejecuta nada: ``MockExecutor`` reproduce una línea de
tiempo fija de mensajes de log hacia la terminal del proyecto y al final
marca la sesión de ejecución como completada.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from .database import update_execution_session
from .observability import record_execution
from .terminal import TerminalHub


logger = logging.getLogger(__name__)

# (retardo en ms, mensaje); el primero se formatea con el comando
EXECUTION_STEPS: tuple[tuple[int, str], ...] = (
    (500, "\x1b[36m> {command}\x1b[0m\r\n"),
    (1000, "\x1b[33mInitializing execution environment...\x1b[0m\r\n"),
    (800, "\x1b[32m✓ Environment ready\x1b[0m\r\n"),
    (600, "\x1b[33mChecking dependencies...\x1b[0m\r\n"),
    (900, "\x1b[32m✓ Dependencies resolved\x1b[0m\r\n"),
    (700, "\x1b[33mCompiling/transpiling source code...\x1b[0m\r\n"),
    (1200, "\x1b[32m✓ Compilation successful\x1b[0m\r\n"),
    (500, "\x1b[33mStarting application...\x1b[0m\r\n"),
    (800, "\x1b[97mServer running on port 3000\x1b[0m\r\n"),
    (300, "\x1b[36mReady to accept connections\x1b[0m\r\n"),
    (1000, "\x1b[32mExecution completed successfully\x1b[0m\r\n"),
)


def render_steps(command: str) -> list[tuple[int, str]]:
    return [(delay, message.replace("{command}", command)) for delay, message in EXECUTION_STEPS]


class MockExecutor:
    """Reproduce ``EXECUTION_STEPS`` sobre la terminal de un proyecto."""

    def __init__(self, hub: TerminalHub, delay_scale: float = 1.0) -> None:
        self.hub = hub
        self.delay_scale = max(delay_scale, 0.0)

    async def run(self, project_id: int, session_id: int, command: str) -> None:
        output = ""
        try:
            for delay_ms, message in render_steps(command):
                await asyncio.sleep(delay_ms * self.delay_scale / 1000)
                output += message
                await self.hub.broadcast(project_id, {"type": "output", "data": message})

            update_execution_session(
                session_id,
                status="completed",
                output=output,
                exit_code=0,
                completed_at=datetime.utcnow(),
            )
            exit_code = 0
            record_execution("completed")
        except Exception:
            logger.exception("Falló la ejecución simulada %s del proyecto %s", session_id, project_id)
            update_execution_session(
                session_id,
                status="failed",
                output=output,
                exit_code=1,
                completed_at=datetime.utcnow(),
            )
            exit_code = 1
            record_execution("failed")

        await self.hub.broadcast(
            project_id,
            {"type": "session_complete", "sessionId": session_id, "exitCode": exit_code},
        )
