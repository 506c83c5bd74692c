#!/usr/bin/env python3
"""
FocusFlow Command Line Interface

Main entry point for the `focusflow` command.

Usage:
    focusflow dashboard          # Start the API server
    focusflow doctor             # Check configuration and store connectivity
    focusflow version            # Show version

Per-module tools:
    python -m focusflow.tasks.manager --action list --user single-user
    python -m focusflow.tasks.breakdown --action list --user single-user --task-id 1
    python -m focusflow.capture.brain_dump --action list --user single-user
    python -m focusflow.rewards.achievements --action stats --user single-user
    python -m focusflow.rewards.streaks --user single-user
"""

import argparse
import sys


def cmd_dashboard(args):
    """Handle dashboard subcommand."""
    import uvicorn

    from focusflow.config_models import get_config

    config = get_config().dashboard
    host = args.host or config.host
    port = args.port or config.api_port

    print(f"Starting FocusFlow API at http://{host}:{port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "focusflow.dashboard.backend.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level="info",
    )


def cmd_version(args):
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        v = version("focusflow")
    except PackageNotFoundError:
        from focusflow import __version__

        v = f"{__version__} (development)"

    print(f"FocusFlow version {v}")


def cmd_doctor(args):
    """Run diagnostic checks on the FocusFlow installation.

    Checks Python version, dependencies, configuration and store
    connectivity. Returns exit code 0 if all critical checks pass.
    """
    import os

    from focusflow import CONFIG_PATH

    checks_passed = 0
    checks_failed = 0
    checks_warned = 0

    def _pass(msg: str) -> None:
        nonlocal checks_passed
        checks_passed += 1
        print(f"  ✓ {msg}")

    def _fail(msg: str) -> None:
        nonlocal checks_failed
        checks_failed += 1
        print(f"  ✗ {msg}")

    def _warn(msg: str) -> None:
        nonlocal checks_warned
        checks_warned += 1
        print(f"  ! {msg}")

    print("FocusFlow Doctor")
    print("=" * 50)

    # 1. Python version
    print("\n[Python Version]")
    v = sys.version_info
    if v >= (3, 10):
        _pass(f"Python {v.major}.{v.minor}.{v.micro}")
    else:
        _fail(f"Python {v.major}.{v.minor}.{v.micro} (requires >= 3.10)")

    # 2. Dependencies
    print("\n[Dependencies]")
    for pkg in ("fastapi", "uvicorn", "pydantic", "yaml", "dotenv", "httpx", "structlog"):
        try:
            __import__(pkg)
            _pass(pkg)
        except ImportError:
            _fail(f"{pkg} -- missing (required)")

    # 3. Configuration
    print("\n[Configuration]")
    from focusflow.config_models import get_config

    if CONFIG_PATH.exists():
        _pass(f"{CONFIG_PATH} found")
    else:
        _warn(f"{CONFIG_PATH} not found -- using defaults (set FOCUSFLOW_HOME)")

    config = get_config()
    _pass(f"store backend: {config.store.backend}")
    _pass(f"streak adjacency: {config.streaks.adjacency}")
    if config.dashboard.require_auth:
        _pass(f"auth required (user header: {config.dashboard.user_header})")
    else:
        _warn(f"auth disabled -- every request acts as '{config.app.default_user_id}'")

    if config.store.backend == "remote":
        if not config.store.api_base:
            _fail("store.api_base is not set")
        if os.environ.get(config.store.api_key_env):
            _pass(f"{config.store.api_key_env} set")
        else:
            _warn(f"{config.store.api_key_env} not set -- requests go out unauthenticated")

    # 4. Store connectivity
    print("\n[Store]")
    from focusflow.store import StoreError, create_store

    try:
        store = create_store(config.store)
    except ValueError as e:
        _fail(str(e))
    else:
        try:
            store.health_check()
            _pass(f"{store.name} store reachable")
        except StoreError as e:
            _fail(f"{store.name} store unreachable: {e}")
        finally:
            store.close()

    print("\n" + "=" * 50)
    print(f"{checks_passed} passed, {checks_warned} warnings, {checks_failed} failed")
    return 1 if checks_failed else 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="focusflow",
        description="FocusFlow - energy-aware task tracking for ADHD brains",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Dashboard subcommand
    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Start the API server"
    )
    dashboard_parser.add_argument(
        "--host", default=None, help="Host to bind to (default: dashboard.host)"
    )
    dashboard_parser.add_argument(
        "--port", type=int, default=None, help="Port to bind to (default: dashboard.api_port)"
    )
    dashboard_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )
    dashboard_parser.set_defaults(func=cmd_dashboard)

    # Doctor subcommand
    doctor_parser = subparsers.add_parser(
        "doctor", help="Check configuration and store connectivity"
    )
    doctor_parser.set_defaults(func=cmd_doctor)

    # Version subcommand
    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    args = parser.parse_args()

    # Handle --version at top level
    if args.version:
        cmd_version(args)
        return

    # If no command given, show help
    if not args.command:
        parser.print_help()
        return

    # Execute command
    result = args.func(args)

    # Commands may return an exit code
    if isinstance(result, int) and result != 0:
        sys.exit(result)


if __name__ == "__main__":
    main()
