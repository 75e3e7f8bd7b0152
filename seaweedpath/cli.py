# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Command-line access to the path adapter."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from collections.abc import Sequence
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from seaweedpath.application import Result
from seaweedpath.container import Container
from seaweedpath.infrastructure.db import init_db
from seaweedpath.infrastructure.health import check_blob_store, check_database
from seaweedpath.shared.logging import logger, set_correlation_id, setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seaweedpath", description="Path-addressed files on SeaweedFS"
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the path mapping table")

    put = sub.add_parser("put", help="Write a local file (or '-' for stdin) to a path")
    put.add_argument("path")
    put.add_argument("source")

    for name, help_text in (
        ("cat", "Print the content stored at a path"),
        ("rm", "Delete a path and its blob"),
        ("stat", "Show cached metadata for a path"),
        ("url", "Show the public URL of a path"),
        ("exists", "Check that a path and its blob exist"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("path")

    audit = sub.add_parser("audit", help="Report mapping/blob drift for the given paths")
    audit.add_argument("paths", nargs="+")

    sub.add_parser("health", help="Check the mapping database and the SeaweedFS master")
    return parser


def _fail(result: Result) -> int:
    error = result.error
    if error is None:
        raise ValueError("successful result reported as a failure")
    print(f"error: {error.code}: {error}", file=sys.stderr)
    return 1


def _emit(payload: object) -> None:
    print(json.dumps(payload, sort_keys=True))


def _read_source(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def run(args: argparse.Namespace, container: Container) -> int:
    adapter = container.adapter

    if args.command == "init-db":
        init_db(container.engine)
        return 0

    if args.command == "put":
        result = adapter.write(args.path, _read_source(args.source))
        if not result.ok:
            return _fail(result)
        _emit(result.unwrap().to_dict())
        return 0

    if args.command == "cat":
        read = adapter.read(args.path)
        if not read.ok:
            return _fail(read)
        sys.stdout.buffer.write(read.unwrap().contents)
        sys.stdout.flush()
        return 0

    if args.command == "rm":
        deleted = adapter.delete(args.path)
        return 0 if deleted.ok else _fail(deleted)

    if args.command == "stat":
        meta = adapter.get_metadata(args.path)
        if not meta.ok:
            return _fail(meta)
        _emit(meta.unwrap().to_dict())
        return 0

    if args.command == "url":
        url = adapter.get_url(args.path)
        if not url.ok:
            return _fail(url)
        print(url.unwrap())
        return 0

    if args.command == "exists":
        found = adapter.has(args.path)
        if not found.ok and not found.not_found:
            return _fail(found)
        _emit(bool(found))
        return 0 if found else 1

    if args.command == "audit":
        reports = container.drift_auditor.audit(args.paths)
        for report in reports:
            _emit({"path": report.path, "fid": report.fid, "status": str(report.status)})
        return 1 if any(report.drifted for report in reports) else 0

    if args.command == "health":
        try:
            database = check_database(container.engine)
        except SQLAlchemyError as exc:
            logger.opt(exception=exc).warning("health: database unreachable")
            database = False
        blob_store = check_blob_store(container.blob_client)
        _emit({"database": database, "blob_store": blob_store})
        return 0 if database and blob_store else 1

    raise ValueError(f"unknown command {args.command}")


def main(argv: Sequence[str] | None = None, *, container: Container | None = None) -> int:
    args = _build_parser().parse_args(argv)
    container = container or Container()
    level = args.log_level or ("DEBUG" if container.config.debug_logging else None)
    setup_logging(level)
    set_correlation_id(uuid.uuid4().hex[:12])
    logger.debug(f"cli: command={args.command}")
    try:
        return run(args, container)
    finally:
        container.close()


__all__ = ["main", "run"]
