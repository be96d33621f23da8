"""CLI entry point for the recruiter outreach engine."""

import argparse
import asyncio
import logging
import sys

from src.core.config import Settings
from src.core.credential import CredentialStore
from src.core.errors import PlatformError
from src.core.reference import ReferenceLists, load_reference_lists
from src.notify.mailer import build_alerter
from src.pipeline.context import RunContext
from src.pipeline.orchestrator import export_outcomes_json, run_all_jobs
from src.platforms.boss.client import BossClient
from src.platforms.boss.greetings import configure_greetings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also append log output to this file (e.g. boss.log)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recruiter outreach engine - rank recommended candidates, "
                    "greet them and request resumes",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- run subcommand (default) ---
    run_parser = subparsers.add_parser("run", help="Collect, rank and greet candidates")
    _add_common(run_parser)
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without contacting the platform",
    )
    run_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export job outcomes to format (json)",
    )
    run_parser.add_argument(
        "--exit-after-outreach",
        action="store_true",
        help="Cancel pending resume retriers instead of waiting for them",
    )

    # --- setup-greetings subcommand ---
    greetings_parser = subparsers.add_parser(
        "setup-greetings",
        help="Enable automatic greeting and set a greeting for every job",
    )
    _add_common(greetings_parser)

    # --- accept-resume subcommand ---
    accept_parser = subparsers.add_parser(
        "accept-resume",
        help="Accept a resume a candidate offered in chat",
    )
    _add_common(accept_parser)
    accept_parser.add_argument("--mid", required=True, help="Chat message id")
    accept_parser.add_argument("--security-id", required=True, help="Candidate security id")

    # --- backward compat: top-level flags for run ---
    parser.add_argument("--config", default="config/settings.yaml", help=argparse.SUPPRESS)
    parser.add_argument("--dry-run", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--export", choices=["json"], help=argparse.SUPPRESS)
    parser.add_argument("--exit-after-outreach", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--verbose", "-v", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--log-file", default=None, help=argparse.SUPPRESS)

    args = parser.parse_args(argv)

    # Default to run when no subcommand given
    if args.command is None:
        args.command = "run"

    return args


def setup_logging(verbose: bool, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=handlers,
    )


def dry_run(settings: Settings, reference: ReferenceLists) -> None:
    """Print what would happen without contacting the platform."""
    store = CredentialStore(settings.credential.cookie_path)
    has_cookie = store.load() and bool(store.current)
    pacing = settings.pacing

    print(f"[DRY RUN] {len(reference.jobs)} jobs configured")
    for job in reference.jobs:
        print(f"  {job.job_id}: {job.job_name}")
    print(f"[DRY RUN] Allow-lists: {len(reference.school_985)} 985 schools, "
          f"{len(reference.school_211)} 211 schools, "
          f"{len(reference.good_companies)} companies")
    print(f"[DRY RUN] Collection window {pacing.collection_window_s:.0f}s, "
          f"poll every {pacing.poll_interval_s:.0f}s, "
          f"greeting delay {pacing.greeting_delay_s:.0f}s, "
          f"resume retry every {pacing.resume_retry_interval_s:.0f}s")
    status = "OK" if has_cookie else "MISSING"
    print(f"[DRY RUN] Session cookie ({settings.credential.cookie_path}): {status}")
    print(f"[DRY RUN] Greeting setup: {'on' if settings.greeting.enabled else 'off'}, "
          f"alerts: {'on' if settings.alert.enabled else 'off'}")
    print("[DRY RUN] Would greet 0 candidates (no platform access in dry-run)")


async def run(
    settings: Settings,
    reference: ReferenceLists,
    export_format: str | None,
    exit_after_outreach: bool,
) -> None:
    """Run the full sourcing cycle against the platform."""
    store = CredentialStore(settings.credential.cookie_path)
    store.load()
    watcher = asyncio.create_task(store.watch(settings.credential.reload_interval_s))

    try:
        async with BossClient(settings.platform, store) as client:
            if settings.greeting.enabled:
                try:
                    await configure_greetings(client, settings.greeting)
                except PlatformError as e:
                    logger.warning("Greeting setup failed: %s", e)

            context = RunContext.create(
                settings, reference, client, build_alerter(settings.alert),
            )
            outcomes = await run_all_jobs(context)

            # Print summary
            total_greeted = sum(o.greeted for o in outcomes)
            failed = [o for o in outcomes if o.failed]
            print(f"\nOutreach complete: {total_greeted} candidates greeted across "
                  f"{len(outcomes)} jobs ({len(failed)} failed), "
                  f"{len(context.ledger)} candidates marked contacted.")
            for o in outcomes:
                line = (f"  '{o.job_name}': {o.collected} collected, {o.greeted} greeted, "
                        f"{o.skipped_contacted} skipped, {o.send_errors} send errors")
                if o.quota_exhausted:
                    line += ", quota exhausted"
                if o.failed:
                    line += f" [FAILED: {o.error}]"
                print(line)

            # Export if requested
            if export_format == "json" and outcomes:
                print(f"\n{export_outcomes_json(outcomes)}")

            if exit_after_outreach:
                await context.retriers.cancel_all()
            elif context.retriers.pending:
                print(f"\nWaiting for {context.retriers.pending} resume request(s) "
                      f"to resolve (Ctrl-C to stop)...")
                await context.retriers.join()
    finally:
        watcher.cancel()


async def accept_resume(settings: Settings, mid: str, security_id: str) -> None:
    store = CredentialStore(settings.credential.cookie_path)
    store.load()
    async with BossClient(settings.platform, store) as client:
        await client.accept_resume(mid, security_id)
    print(f"Accepted resume from message {mid}")


async def setup_greetings(settings: Settings) -> None:
    store = CredentialStore(settings.credential.cookie_path)
    store.load()
    async with BossClient(settings.platform, store) as client:
        saved = await configure_greetings(client, settings.greeting)
    print(f"Greeting saved for {saved} job(s)")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "setup-greetings":
        try:
            asyncio.run(setup_greetings(settings))
        except PlatformError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "accept-resume":
        try:
            asyncio.run(accept_resume(settings, args.mid, args.security_id))
        except PlatformError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        # run (default)
        try:
            reference = load_reference_lists(settings.reference, settings.jobs)
        except ValueError as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            sys.exit(1)

        if args.dry_run:
            dry_run(settings, reference)
        else:
            try:
                asyncio.run(run(settings, reference, args.export, args.exit_after_outreach))
            except KeyboardInterrupt:
                print("\nInterrupted - pending resume requests abandoned.", file=sys.stderr)


if __name__ == "__main__":
    main()
