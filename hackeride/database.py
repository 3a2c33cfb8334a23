"""
Módulo de base de datos del IDE.

Define los tres registros planos que maneja el backend (proyectos,
archivos y sesiones de ejecución) y las funciones CRUD que usa la API.
Por defecto utiliza SQLite en memoria compartida, de modo que los datos
viven lo que dura el proceso.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import AppSettings
from .languages import get_language_template


Base = declarative_base()

_ENGINES: dict[str, Engine] = {}


class Project(Base):
    """Proyecto del espacio de trabajo."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    language = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:  # pragma: no cover
        return f"Project(id={self.id}, name={self.name!r}, language={self.language})"


class File(Base):
    """Archivo de un proyecto. ``project_id`` enlaza por convención."""

    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, index=True, nullable=False)
    name = Column(String, nullable=False)
    path = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    language = Column(String, nullable=True)
    is_directory = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)


class ExecutionSession(Base):
    """Ejecución simulada de un comando sobre un proyecto."""

    __tablename__ = "execution_sessions"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, index=True, nullable=False)
    command = Column(String, nullable=False)
    status = Column(String, nullable=False, default="running")
    output = Column(Text, default="")
    exit_code = Column(Integer, nullable=True)
    started_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)


PROJECT_FIELDS = {"name", "language", "description"}
FILE_FIELDS = {"name", "path", "content", "language", "is_directory"}
EXECUTION_FIELDS = {"status", "output", "exit_code", "completed_at"}


# Funciones de infraestructura base

def get_engine(db_url: str | None = None) -> Engine:
    """Devuelve el motor asociado a la URL, creándolo la primera vez.

    Sin URL explícita se usa ``AppSettings.database_url`` (``DATABASE_URL``,
    SQLite en memoria por defecto). Los motores se cachean por URL porque
    una base en memoria solo existe mientras su conexión siga abierta;
    ``StaticPool`` mantiene esa única conexión.
    """

    url = db_url or AppSettings.from_env().database_url
    engine = _ENGINES.get(url)
    if engine is not None:
        return engine

    if url in ("sqlite://", "sqlite:///:memory:"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
    _ENGINES[url] = engine
    return engine


def init_db(engine=None) -> None:
    """Crea las tablas si no existen."""
    if engine is None:
        engine = get_engine()
    Base.metadata.create_all(bind=engine)


def get_session(engine=None) -> Session:
    """Devuelve una sesión de base de datos lista para usar."""
    if engine is None:
        engine = get_engine()
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return SessionLocal()


def _apply_updates(record: Any, updates: dict[str, Any], allowed: set[str]) -> None:
    for key, value in updates.items():
        if key not in allowed:
            raise ValueError(f"Campo no actualizable: {key}")
        setattr(record, key, value)


# Proyectos

def list_projects(engine=None) -> list[Project]:
    session = get_session(engine)
    try:
        return session.query(Project).order_by(Project.id.asc()).all()
    finally:
        session.close()


def get_project(project_id: int, engine=None) -> Optional[Project]:
    session = get_session(engine)
    try:
        return session.get(Project, project_id)
    finally:
        session.close()


def create_project(
    name: str,
    language: str,
    description: Optional[str] = None,
    engine=None,
) -> Project:
    """Crea un proyecto y lo devuelve con su id asignado."""
    session = get_session(engine)
    try:
        now = datetime.utcnow()
        project = Project(
            name=name,
            language=language,
            description=description,
            created_at=now,
            updated_at=now,
        )
        session.add(project)
        session.commit()
        session.refresh(project)
        return project
    finally:
        session.close()


def update_project(project_id: int, engine=None, **updates: Any) -> Optional[Project]:
    session = get_session(engine)
    try:
        project = session.get(Project, project_id)
        if project is None:
            return None
        _apply_updates(project, updates, PROJECT_FIELDS)
        project.updated_at = datetime.utcnow()
        session.commit()
        session.refresh(project)
        return project
    finally:
        session.close()


def delete_project(project_id: int, engine=None) -> bool:
    """Borra el proyecto junto con sus archivos y sesiones de ejecución."""
    session = get_session(engine)
    try:
        project = session.get(Project, project_id)
        if project is None:
            return False
        session.query(File).filter(File.project_id == project_id).delete()
        session.query(ExecutionSession).filter(ExecutionSession.project_id == project_id).delete()
        session.delete(project)
        session.commit()
        return True
    finally:
        session.close()


# Archivos

def list_project_files(project_id: int, engine=None) -> list[File]:
    session = get_session(engine)
    try:
        return (
            session.query(File)
            .filter(File.project_id == project_id)
            .order_by(File.id.asc())
            .all()
        )
    finally:
        session.close()


def get_file(file_id: int, engine=None) -> Optional[File]:
    session = get_session(engine)
    try:
        return session.get(File, file_id)
    finally:
        session.close()


def create_file(
    project_id: int,
    name: str,
    path: str,
    content: Optional[str] = None,
    language: Optional[str] = None,
    is_directory: Optional[bool] = None,
    engine=None,
) -> File:
    session = get_session(engine)
    try:
        now = datetime.utcnow()
        record = File(
            project_id=project_id,
            name=name,
            path=path,
            content=content or "",
            language=language,
            is_directory=bool(is_directory),
            created_at=now,
            updated_at=now,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        return record
    finally:
        session.close()


def update_file(file_id: int, engine=None, **updates: Any) -> Optional[File]:
    session = get_session(engine)
    try:
        record = session.get(File, file_id)
        if record is None:
            return None
        _apply_updates(record, updates, FILE_FIELDS)
        record.updated_at = datetime.utcnow()
        session.commit()
        session.refresh(record)
        return record
    finally:
        session.close()


def update_file_content(file_id: int, content: str, engine=None) -> Optional[File]:
    return update_file(file_id, engine=engine, content=content)


def delete_file(file_id: int, engine=None) -> bool:
    session = get_session(engine)
    try:
        record = session.get(File, file_id)
        if record is None:
            return False
        session.delete(record)
        session.commit()
        return True
    finally:
        session.close()


# Sesiones de ejecución

def get_execution_session(session_id: int, engine=None) -> Optional[ExecutionSession]:
    session = get_session(engine)
    try:
        return session.get(ExecutionSession, session_id)
    finally:
        session.close()


def list_project_executions(project_id: int, engine=None) -> list[ExecutionSession]:
    session = get_session(engine)
    try:
        return (
            session.query(ExecutionSession)
            .filter(ExecutionSession.project_id == project_id)
            .order_by(ExecutionSession.id.asc())
            .all()
        )
    finally:
        session.close()


def create_execution_session(
    project_id: int,
    command: str,
    status: str = "running",
    output: str = "",
    exit_code: Optional[int] = None,
    engine=None,
) -> ExecutionSession:
    session = get_session(engine)
    try:
        record = ExecutionSession(
            project_id=project_id,
            command=command,
            status=status or "running",
            output=output or "",
            exit_code=exit_code,
            started_at=datetime.utcnow(),
            completed_at=None,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        return record
    finally:
        session.close()


def update_execution_session(session_id: int, engine=None, **updates: Any) -> Optional[ExecutionSession]:
    session = get_session(engine)
    try:
        record = session.get(ExecutionSession, session_id)
        if record is None:
            return None
        _apply_updates(record, updates, EXECUTION_FIELDS)
        session.commit()
        session.refresh(record)
        return record
    finally:
        session.close()


# Datos iniciales

DEFAULT_PROJECT_NAME = "HackerIDE Workspace"
DEFAULT_TEMPLATE_FILES = (
    ("index.js", "javascript"),
    ("main.py", "python"),
    ("Main.java", "java"),
)


def seed_default_project(engine=None) -> Optional[Project]:
    """Crea el proyecto de bienvenida si el almacén está vacío."""

    if list_projects(engine=engine):
        return None
    project = create_project(
        DEFAULT_PROJECT_NAME,
        "javascript",
        description="Polyglot development environment",
        engine=engine,
    )
    for filename, language in DEFAULT_TEMPLATE_FILES:
        create_file(
            project_id=project.id,
            name=filename,
            path=filename,
            content=get_language_template(language),
            language=language,
            is_directory=False,
            engine=engine,
        )
    return project
