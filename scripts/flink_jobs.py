#!/usr/bin/env python3
"""Manage jars and jobs on a Flink JobManager from the command line.

Example:
    python scripts/flink_jobs.py --url http://jobmanager:8081 upload build/app.jar
    python scripts/flink_jobs.py run 1b2c-app.jar --parallelism 4
    python scripts/flink_jobs.py jobs --running
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from flink_control.clients.flink_client import FlinkClient
from flink_control.config import settings
from flink_control.errors import FlinkClientError
from flink_control.models.client import ClientConfig
from flink_control.models.jar import RunOverrides


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--url",
        default=settings.FLINK_URL,
        help=f"JobManager REST endpoint (default: {settings.FLINK_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.FLINK_REQUEST_TIMEOUT,
        help="Request timeout in seconds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every request")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("jars", help="List uploaded jars")
    upload = sub.add_parser("upload", help="Upload a local jar")
    upload.add_argument("path")
    delete = sub.add_parser("delete", help="Delete an uploaded jar")
    delete.add_argument("jar_id")

    run = sub.add_parser("run", help="Start a job from an uploaded jar")
    run.add_argument("jar_id")
    run.add_argument("--entry-class")
    run.add_argument("--parallelism", type=int)
    run.add_argument("--savepoint-path")
    run.add_argument("--allow-non-restored-state", action="store_true")
    run.add_argument("--program-args")

    jobs = sub.add_parser("jobs", help="List jobs")
    jobs.add_argument("--running", action="store_true", help="Only RUNNING jobs")
    job = sub.add_parser("job", help="Show one job")
    job.add_argument("job_id")
    cancel = sub.add_parser("cancel", help="Cancel a job")
    cancel.add_argument("job_id")
    sub.add_parser("taskmanagers", help="List task managers")
    return parser.parse_args(argv)


def execute(client: FlinkClient, args: argparse.Namespace):
    if args.command == "jars":
        return [jar.model_dump() for jar in client.list_jars()]
    if args.command == "upload":
        return {"jar_id": client.upload_jar(args.path)}
    if args.command == "delete":
        client.delete_jar(args.jar_id)
        return {"deleted": args.jar_id}
    if args.command == "run":
        overrides = RunOverrides(
            entry_class=args.entry_class,
            parallelism=args.parallelism,
            savepoint_path=args.savepoint_path,
            allow_non_restored_state=args.allow_non_restored_state,
            program_args=args.program_args,
        )
        return {"job_id": client.run_jar(args.jar_id, overrides)}
    if args.command == "jobs":
        return client.list_running_jobs() if args.running else client.list_jobs()
    if args.command == "job":
        return client.job_detail(args.job_id)
    if args.command == "cancel":
        return {"job_id": args.job_id, "canceled": client.cancel_job(args.job_id)}
    if args.command == "taskmanagers":
        return client.list_task_managers()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = ClientConfig(
        base_url=args.url,
        timeout=args.timeout,
        savepoint_path=settings.FLINK_SAVEPOINT_PATH or None,
        default_parallelism=settings.FLINK_DEFAULT_PARALLELISM,
    )
    with FlinkClient(config) as client:
        try:
            result = execute(client, args)
        except FlinkClientError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
