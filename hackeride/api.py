"""
API HTTP del IDE y de las búsquedas OSINT.

Expone con FastAPI el CRUD de proyectos y archivos, la ejecución simulada
con su terminal por WebSocket, el catálogo de lenguajes y el flujo de
búsqueda OSINT (alta de sesión autenticada + stream SSE de resultados).
"""

import asyncio
import json
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator

from fastapi import (
    BackgroundTasks,
    Body,
    Depends,
    FastAPI,
    HTTPException,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError

from .auth import BasicCredentialChecker
from .config import AppSettings
from .database import (
    ExecutionSession,
    File,
    Project,
    create_execution_session,
    create_file,
    create_project,
    delete_file,
    delete_project,
    get_execution_session,
    get_engine,
    get_file,
    get_project,
    init_db,
    list_project_executions,
    list_project_files,
    list_projects,
    seed_default_project,
    update_file_content,
    update_project,
)
from .executor import MockExecutor
from .integrations.lookups import LookupServices
from .languages import LANGUAGES, LanguageConfig, get_language, get_language_template
from .observability import Observability
from .orchestrator import OsintOrchestrator, system_message
from .sessions import LookupSessionRegistry
from .terminal import TerminalHub


logger = logging.getLogger(__name__)

settings = AppSettings.from_env()

app = FastAPI(title="HackerIDE API", version="2.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type", "Cache-Control"],
)

Observability(app)
Instrumentator().instrument(app).expose(app)

engine = get_engine(settings.database_url)
init_db(engine)
seed_default_project(engine=engine)

hub = TerminalHub()
executor = MockExecutor(hub, delay_scale=settings.execution_delay_scale)
sessions = LookupSessionRegistry(settings.redis_url)
orchestrator = OsintOrchestrator(LookupServices.from_settings(settings))

basic_scheme = HTTPBasic(auto_error=False)
credential_checker = BasicCredentialChecker.from_settings(settings)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectResponse(CamelModel):
    id: int
    name: str
    language: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_orm(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            name=project.name,
            language=project.language,
            description=project.description,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


class ProjectCreate(CamelModel):
    name: str
    language: str
    description: str | None = None


class ProjectUpdate(CamelModel):
    name: str | None = None
    language: str | None = None
    description: str | None = None


class FileRecordResponse(CamelModel):
    id: int
    project_id: int
    name: str
    path: str
    content: str
    language: str | None = None
    is_directory: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_orm(cls, record: File) -> "FileRecordResponse":
        return cls(
            id=record.id,
            project_id=record.project_id,
            name=record.name,
            path=record.path,
            content=record.content or "",
            language=record.language,
            is_directory=bool(record.is_directory),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class FileCreate(CamelModel):
    name: str
    path: str
    content: str | None = None
    language: str | None = None
    is_directory: bool | None = None


class ExecutionSessionResponse(CamelModel):
    id: int
    project_id: int
    command: str
    status: str
    output: str | None = None
    exit_code: int | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_orm(cls, record: ExecutionSession) -> "ExecutionSessionResponse":
        return cls(
            id=record.id,
            project_id=record.project_id,
            command=record.command,
            status=record.status,
            output=record.output,
            exit_code=record.exit_code,
            started_at=record.started_at,
            completed_at=record.completed_at,
        )


class RunRequest(CamelModel):
    command: str = "run"


class RunResponse(CamelModel):
    session_id: int
    status: str


class LanguageResponse(CamelModel):
    id: str
    name: str
    file_extensions: list[str]
    monaco_language: str
    default_file: str
    build_command: str | None = None
    run_command: str

    @classmethod
    def from_config(cls, language: LanguageConfig) -> "LanguageResponse":
        return cls(
            id=language.id,
            name=language.name,
            file_extensions=list(language.file_extensions),
            monaco_language=language.monaco_language,
            default_file=language.default_file,
            build_command=language.build_command,
            run_command=language.run_command,
        )


class TemplateResponse(CamelModel):
    language: str
    default_file: str
    content: str


class LookupRequest(BaseModel):
    query: str
    type: str | None = None


class LookupStarted(CamelModel):
    session_id: str
    status: str
    query: str


class LookupSessionStatus(CamelModel):
    session_id: str
    active: bool
    query: str


@contextmanager
def storage_errors(detail: str) -> Iterator[None]:
    """Convierte fallos del almacén en un 500 genérico."""

    try:
        yield
    except SQLAlchemyError:
        logger.exception(detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def get_project_or_404(project_id: int) -> Project:
    with storage_errors("Failed to fetch project"):
        project = get_project(project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def require_lookup_credentials(credentials: HTTPBasicCredentials | None = Depends(basic_scheme)) -> str:
    return credential_checker(credentials)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.get("/health")
async def health():
    """Endpoint de salud para comprobar que la API funciona."""
    return {"status": "ok"}


# Proyectos

@app.get("/api/projects", response_model=list[ProjectResponse])
async def list_projects_endpoint():
    with storage_errors("Failed to fetch projects"):
        projects = list_projects()
    return [ProjectResponse.from_orm(project) for project in projects]


@app.get("/api/projects/{project_id}", response_model=ProjectResponse)
async def get_project_endpoint(project_id: int):
    return ProjectResponse.from_orm(get_project_or_404(project_id))


@app.post("/api/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(payload: ProjectCreate):
    with storage_errors("Failed to create project"):
        project = create_project(payload.name, payload.language, description=payload.description)
    logger.info("Proyecto creado: %s (%s)", project.id, project.name)
    return ProjectResponse.from_orm(project)


@app.patch("/api/projects/{project_id}", response_model=ProjectResponse)
async def update_project_endpoint(project_id: int, payload: ProjectUpdate):
    """Actualiza solo los campos enviados; ``name`` y ``language`` no admiten null."""
    updates = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key == "description"
    }
    with storage_errors("Failed to update project"):
        project = update_project(project_id, **updates)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return ProjectResponse.from_orm(project)


@app.delete("/api/projects/{project_id}")
async def delete_project_endpoint(project_id: int):
    with storage_errors("Failed to delete project"):
        deleted = delete_project(project_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return {"message": "Project deleted successfully"}


# Archivos

@app.get("/api/projects/{project_id}/files", response_model=list[FileRecordResponse])
async def list_files_endpoint(project_id: int):
    with storage_errors("Failed to fetch files"):
        files = list_project_files(project_id)
    return [FileRecordResponse.from_orm(record) for record in files]


@app.post(
    "/api/projects/{project_id}/files",
    response_model=FileRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_file_endpoint(project_id: int, payload: FileCreate):
    get_project_or_404(project_id)
    with storage_errors("Failed to create file"):
        record = create_file(
            project_id=project_id,
            name=payload.name,
            path=payload.path,
            content=payload.content,
            language=payload.language,
            is_directory=payload.is_directory,
        )
    return FileRecordResponse.from_orm(record)


@app.get("/api/files/{file_id}", response_model=FileRecordResponse)
async def get_file_endpoint(file_id: int):
    with storage_errors("Failed to fetch file"):
        record = get_file(file_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileRecordResponse.from_orm(record)


@app.put("/api/files/{file_id}/content", response_model=FileRecordResponse)
async def update_file_content_endpoint(file_id: int, body: Any = Body(None)):
    content = body.get("content") if isinstance(body, dict) else None
    if not isinstance(content, str):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content must be a string")
    with storage_errors("Failed to update file content"):
        record = update_file_content(file_id, content)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileRecordResponse.from_orm(record)


@app.delete("/api/files/{file_id}")
async def delete_file_endpoint(file_id: int):
    with storage_errors("Failed to delete file"):
        deleted = delete_file(file_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return {"message": "File deleted successfully"}


# Ejecución simulada

@app.post("/api/projects/{project_id}/run", response_model=RunResponse)
async def run_project(project_id: int, background_tasks: BackgroundTasks, payload: RunRequest | None = None):
    """Crea una sesión de ejecución y programa la salida simulada en la terminal."""

    get_project_or_404(project_id)
    command = payload.command if payload else "run"
    with storage_errors("Failed to start execution"):
        session = create_execution_session(project_id, command, status="running", output="")
    background_tasks.add_task(executor.run, project_id, session.id, command)
    logger.info("Ejecución %s iniciada en el proyecto %s: %s", session.id, project_id, command)
    return RunResponse(session_id=session.id, status="started")


@app.get("/api/projects/{project_id}/executions", response_model=list[ExecutionSessionResponse])
async def list_executions_endpoint(project_id: int):
    with storage_errors("Failed to fetch execution sessions"):
        records = list_project_executions(project_id)
    return [ExecutionSessionResponse.from_orm(record) for record in records]


@app.get("/api/execution-sessions/{session_id}", response_model=ExecutionSessionResponse)
async def get_execution_session_endpoint(session_id: int):
    with storage_errors("Failed to fetch execution session"):
        record = get_execution_session(session_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Execution session not found")
    return ExecutionSessionResponse.from_orm(record)


@app.websocket("/ws")
async def terminal_socket(websocket: WebSocket, project_id: str | None = Query(None, alias="projectId")):
    try:
        parsed_id = int(project_id or "0")
    except ValueError:
        parsed_id = 0
    if parsed_id <= 0:
        await websocket.accept()
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await hub.register(parsed_id, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        hub.unregister(parsed_id, websocket)


# Lenguajes

@app.get("/api/languages", response_model=list[LanguageResponse], response_model_exclude_none=True)
async def list_languages():
    return [LanguageResponse.from_config(language) for language in LANGUAGES]


@app.get("/api/languages/{language_id}/template", response_model=TemplateResponse)
async def language_template(language_id: str):
    language = get_language(language_id)
    if not language:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Language not found")
    return TemplateResponse(
        language=language.id,
        default_file=language.default_file,
        content=get_language_template(language.id),
    )


# Búsquedas OSINT

@app.post("/api/lookup", response_model=LookupStarted)
async def start_lookup(body: LookupRequest, username: str = Depends(require_lookup_credentials)):
    """Registra una búsqueda; los resultados se leen luego en ``/api/stream/{id}``."""

    session_id = sessions.create(body.query)
    logger.info("Búsqueda %s registrada por %s", session_id, username)
    return LookupStarted(session_id=session_id, status="started", query=body.query)


def _sse(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


@app.get("/api/stream/{session_id}")
async def stream_lookup(session_id: str):
    query = sessions.get(session_id)
    if query is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

    async def event_stream():
        try:
            async for result in orchestrator.perform_lookup(query, session_id):
                yield _sse(result.to_dict())
                await asyncio.sleep(settings.stream_delay_seconds)
        except Exception as exc:
            logger.exception("Error transmitiendo la búsqueda %s", session_id)
            yield _sse(system_message(query, session_id, f"Stream error: {exc}", error=True).to_dict())
        finally:
            sessions.discard(session_id)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@app.get("/api/sessions/{session_id}/status", response_model=LookupSessionStatus)
async def lookup_session_status(session_id: str):
    query = sessions.get(session_id)
    return LookupSessionStatus(session_id=session_id, active=query is not None, query=query or "")
