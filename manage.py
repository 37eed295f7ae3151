#!/usr/bin/env python3
"""
OrderDesk management CLI.

Usage:
    python manage.py migrate     Apply pending database migrations
    python manage.py verify      Check schema integrity
    python manage.py start       Migrate and start the API server
    python manage.py stop        Graceful shutdown
    python manage.py status      Server and migration status
"""

import argparse
import asyncio
import os
import platform
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".orderdesk.pid"

IS_WINDOWS = platform.system() == "Windows"


def _read_pid() -> int | None:
    """Read PID from the PID file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}", "/NH"],
                capture_output=True,
                text=True,
            )
            return str(pid) in result.stdout
        except OSError:
            return False
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _kill_pid(pid: int) -> bool:
    if IS_WINDOWS:
        try:
            subprocess.run(["taskkill", "/PID", str(pid), "/T", "/F"], capture_output=True)
            return True
        except OSError:
            return False
    try:
        os.kill(pid, signal.SIGTERM)
        return True
    except OSError:
        return False


def _is_port_free(port: int) -> bool:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def _run_migrations() -> bool:
    from orderdesk.infrastructure.storage.sqlite.migrations import run_migrations

    results = asyncio.run(run_migrations())
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")
    return all(r.success for r in results)


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    if not _run_migrations():
        sys.exit(1)


def cmd_verify(args: argparse.Namespace) -> None:
    """Check schema integrity."""
    from orderdesk.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    failed = False
    for check in asyncio.run(verify_schema_integrity()):
        print(f"[{check['status']}] {check['check']}")
        if check["status"] != "PASS":
            failed = True
            for key, value in check.items():
                if key not in ("check", "status"):
                    print(f"       {key}: {value}")
    if failed:
        sys.exit(1)


def cmd_start(args: argparse.Namespace) -> None:
    """Migrate and start the server in the background."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Port {args.port} is in use.")
        sys.exit(1)

    if not _run_migrations():
        sys.exit(1)

    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "orderdesk.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        uvicorn_cmd.append("--reload")

    print(f"Starting server on {args.host}:{args.port}...")
    if IS_WINDOWS:
        proc = subprocess.Popen(
            uvicorn_cmd,
            cwd=str(ROOT_DIR),
            creationflags=subprocess.CREATE_NEW_PROCESS_GROUP,
        )
    else:
        proc = subprocess.Popen(uvicorn_cmd, cwd=str(ROOT_DIR))

    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  Health:   http://{args.host}:{args.port}/api/health")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    if _kill_pid(pid):
        for _ in range(30):
            if not _is_pid_alive(pid):
                break
            time.sleep(0.1)
        else:
            print("Warning: Process did not exit within 3 seconds.")

    PID_FILE.unlink(missing_ok=True)
    print("Server stopped." if not _is_pid_alive(pid) else "Warning: Server may still be running.")


def cmd_status(args: argparse.Namespace) -> None:
    """Report server and migration status."""
    from orderdesk.infrastructure.storage.sqlite.migrations import get_migration_status

    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file. Port {args.port} is in use by another process.")
    else:
        print(f"Server is not running (port {args.port} is free).")

    status = asyncio.run(get_migration_status())
    print(f"Database exists:    {status['exists']}")
    print(f"Current version:    {status['current_version'] or 'N/A'}")
    print(f"Pending migrations: {status['pending_migrations']}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="OrderDesk management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.set_defaults(func=cmd_migrate)

    p_verify = sub.add_parser("verify", help="Check schema integrity")
    p_verify.set_defaults(func=cmd_verify)

    p_start = sub.add_parser("start", help="Migrate and start the server")
    p_start.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_start.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_start.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_start.set_defaults(func=cmd_start)

    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    p_status = sub.add_parser("status", help="Server and migration status")
    p_status.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
    p_status.set_defaults(func=cmd_status)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
