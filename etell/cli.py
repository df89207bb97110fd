#!/usr/bin/env python3
"""
CLI entry point for the etell WiFi placement toolkit.

Defines the following commands:
  etell ingest <src> [--db PATH]
  etell sessions [--db PATH]
  etell analyze SESSION_ID [--db PATH] [--out FILE]
  etell layout SESSION_ID [--db PATH] [--out FILE]
  etell serve [--db PATH] [--port 8000]
  etell version
"""

import sys
import os
import hashlib
from argparse import ArgumentParser, Namespace
from importlib.metadata import PackageNotFoundError, version as _get_version

import uvicorn
from pydantic import BaseModel, ValidationError

from etell.errors import SessionExistsError
from etell.utils.log import get_logger
from etell.storage.dao import DAO
from etell.server import create_app
from etell.analysis.editor import LayoutEditor
from etell.analysis.placement import analyze_optimal_placement
from etell.utils.validate import Session

logger = get_logger(__name__)

DEFAULT_DB = "etell.sqlite"


def _compute_sha256(file_path: str, chunk_size: int = 8192) -> str:
    h = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def _session_files(src: str) -> list[str]:
    if os.path.isfile(src):
        return [src]
    found: list[str] = []
    for root, _, files in os.walk(src):
        for filename in sorted(files):
            if filename.endswith(".json"):
                found.append(os.path.join(root, filename))
    return found


def _write_result(result: BaseModel, out: str | None) -> None:
    text = result.model_dump_json(indent=2)
    if out is None:
        sys.stdout.write(text + "\n")
        return
    with open(out, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info("Wrote %s", out)


def ingest(db_path: str, src: str) -> int:
    """
    Ingest calibration session JSON files into the session DB.

    Parameters
    ----------
    db_path
        SQLite database file.
    src
        A session `.json` file, or a directory searched recursively for them.

    Returns
    -------
    int
        Number of sessions stored.
    """
    logger.info("Ingest: db=%s, src=%s", db_path, src)
    dao = DAO(db_path)
    stored = 0
    for file_path in _session_files(src):
        sha256 = _compute_sha256(file_path)
        if dao.session_exists(sha256):
            logger.info("Skipping already ingested file: %s", file_path)
            continue
        with open(file_path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            session = Session.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("Invalid session file %s: %s", file_path, exc)
            continue
        try:
            dao.add_session(session, sha256=sha256)
        except SessionExistsError as exc:
            logger.warning("Skipping %s: %s", file_path, exc.message)
            continue
        logger.info("Stored session %s with %d samples", session.id, len(session.samples))
        stored += 1
    return stored


def sessions(db_path: str) -> None:
    """
    Log a one-line summary per stored session.
    """
    for summary in DAO(db_path).list_sessions():
        logger.info(
            "%s  started=%s  ended=%s  samples=%d",
            summary.id, summary.started_at.isoformat(),
            summary.ended_at.isoformat() if summary.ended_at else "-",
            summary.n_samples,
        )


def analyze(db_path: str, session_id: str, out: str | None) -> None:
    """
    Run the placement analysis on a stored session and emit JSON.
    """
    logger.info("Analyze: db=%s, session=%s", db_path, session_id)
    session = DAO(db_path).get_session(session_id)
    _write_result(analyze_optimal_placement(session), out)


def layout(db_path: str, session_id: str, out: str | None) -> None:
    """
    Lay a stored session's samples out as rooms and run the layout analysis.
    """
    logger.info("Layout: db=%s, session=%s", db_path, session_id)
    session = DAO(db_path).get_session(session_id)
    _write_result(LayoutEditor.from_samples(session.samples).analyze(), out)


def serve(db_path: str, port: int) -> None:
    """
    Spin up FastAPI+Uvicorn to serve the JSON API.

    Parameters
    ----------
    db_path
        SQLite database file.
    port
        Port on which to serve HTTP.
    """
    logger.info("Serve: db=%s, port=%d", db_path, port)
    app = create_app(db_path)
    uvicorn.run(app, host="127.0.0.1", port=port)

def version() -> None:
    """
    Print the installed etell package version.
    """
    try:
        ver = _get_version("etell")
    except PackageNotFoundError:
        ver = "unknown"
    logger.info("etell version %s", ver)


def parse_args(argv: list[str] | None = None) -> Namespace:
    """
    Parse command-line arguments and return the populated namespace.
    """
    parser = ArgumentParser(prog="etell")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_db(p: ArgumentParser) -> None:
        p.add_argument("--db", type=str, default=DEFAULT_DB, help="Session database file.")

    # etell ingest
    p = subparsers.add_parser("ingest", help="Ingest calibration session files.")
    p.add_argument("src", type=str, help="Session JSON file or directory.")
    add_db(p)

    # etell sessions
    p = subparsers.add_parser("sessions", help="List stored sessions.")
    add_db(p)

    # etell analyze / layout
    for name, help_text in (
        ("analyze", "Router and extender placement for a session."),
        ("layout", "Floor-plan layout analysis for a session."),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("session_id", type=str, help="Session id.")
        p.add_argument("--out", type=str, help="Write JSON here instead of stdout.")
        add_db(p)

    # etell serve
    p = subparsers.add_parser("serve", help="Serve via FastAPI + Uvicorn.")
    add_db(p)
    p.add_argument(
        "--port", type=int, default=8000, help="Port number to serve on."
    )

    # etell version
    subparsers.add_parser("version", help="Show etell version and exit.")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """
    Entry point: dispatch to the selected subcommand.
    """
    args = parse_args(argv)
    match args.command:
        case "ingest":
            ingest(args.db, args.src)
        case "sessions":
            sessions(args.db)
        case "analyze":
            analyze(args.db, args.session_id, args.out)
        case "layout":
            layout(args.db, args.session_id, args.out)
        case "serve":
            serve(args.db, args.port)
        case "version":
            version()
        case _:
            sys.exit(1)


if __name__ == "__main__":
    main()
