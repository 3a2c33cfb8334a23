"""Terminal de línea de comandos para búsquedas OSINT.

Ejemplo:
    python scripts/lookup_cli.py "+14155552671" --base-url http://127.0.0.1:3000
"""

from __future__ import annotations

import argparse
import asyncio
import os
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from hackeride.lookup_client import LookupClient, format_result


async def main(queries: list[str], base_url: str, username: str, password: str) -> None:
    async with LookupClient(base_url, username, password) as client:
        for query in queries:
            try:
                async for message in client.lookup(query):
                    for line in format_result(message):
                        print(line)
            except Exception as exc:  # se informa y se sigue con la siguiente consulta
                print(f"Error: {exc}")
            print()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Footprint-X: búsquedas OSINT desde la terminal")
    parser.add_argument("queries", nargs="+", help="Teléfono, correo, IP o nombre a buscar")
    parser.add_argument("--base-url", dest="base_url", default=os.getenv("HACKERIDE_BASE_URL", "http://127.0.0.1:3000"))
    parser.add_argument("--user", dest="username", default=os.getenv("LOOKUP_USERNAME", "admin"))
    parser.add_argument("--password", dest="password", default=os.getenv("LOOKUP_PASSWORD", "admin123"))
    args = parser.parse_args()

    asyncio.run(main(args.queries, args.base_url, args.username, args.password))
