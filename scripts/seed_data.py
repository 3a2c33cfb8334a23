"""Carga datos seed para desarrollo local.

Crea las tablas si no existen, el proyecto de bienvenida y un proyecto de
ejemplo por lenguaje con su plantilla. Solo tiene sentido con un
``DATABASE_URL`` persistente (p.ej. ``sqlite:///./hackeride.db``).
"""

import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from hackeride.database import (
    create_file,
    create_project,
    get_engine,
    init_db,
    list_projects,
    seed_default_project,
)
from hackeride.languages import LANGUAGES, get_language_template


def seed() -> None:
    engine = get_engine()
    init_db(engine=engine)
    seed_default_project(engine=engine)

    existing = {project.name for project in list_projects(engine=engine)}
    created = 0
    for language in LANGUAGES:
        name = f"{language.name} Sandbox"
        if name in existing:
            continue
        project = create_project(name, language.id, description=f"Proyecto de ejemplo {language.name}", engine=engine)
        create_file(
            project_id=project.id,
            name=language.default_file,
            path=language.default_file,
            content=get_language_template(language.id),
            language=language.id,
            engine=engine,
        )
        created += 1

    if created:
        print(f"Proyectos de demo insertados: {created}")
    else:
        print("Datos de demo ya existentes; no se insertan duplicados")


if __name__ == "__main__":
    seed()
