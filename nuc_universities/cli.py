"""CLI entry point for nuc_universities."""

import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table

from nuc_universities.config import load_config, load_sources
from nuc_universities.data.collection import CollectionStore
from nuc_universities.net.http_client import DEFAULT_USER_AGENT, HttpClient
from nuc_universities.pipeline.orchestrator import CycleSummary, Orchestrator
from nuc_universities.scrapers.fetcher import SourceFetcher
from nuc_universities.utils.file_utils import export_universities
from nuc_universities.utils.logging_setup import setup_logging

console = Console()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="nuc_universities",
        description="Scrape the NUC university listings and serve them as a JSON API",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- serve command ---
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", type=str, help="Interface to bind")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")
    serve_parser.add_argument("--config", type=Path, help="Path to config YAML file")

    # --- scrape command ---
    scrape_parser = subparsers.add_parser("scrape", help="Run one scrape cycle and print the results")
    scrape_parser.add_argument("--config", type=Path, help="Path to config YAML file")
    scrape_parser.add_argument("--output", type=Path, help="Write the records to this JSON file")
    scrape_parser.add_argument("--limit", type=int, default=20, help="Rows to show in the table (0 for none)")

    # --- sources command ---
    sources_parser = subparsers.add_parser("sources", help="Show the configured listing pages")
    sources_parser.add_argument("--config", type=Path, help="Path to config YAML file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "scrape":
        return cmd_scrape(args)
    elif args.command == "sources":
        return cmd_sources(args)

    return 0


def build_orchestrator(config: dict, store: CollectionStore | None = None) -> Orchestrator:
    """Wire the HTTP client, fetcher and sources from *config*."""
    timeouts = config.get("timeouts", {})
    http_client = HttpClient(
        user_agent=config.get("user_agent", DEFAULT_USER_AGENT),
        timeout=(
            float(timeouts.get("connect", 10)),
            float(timeouts.get("read", 30)),
        ),
        max_retries=int(config.get("retries", 3)),
        verify=bool(config.get("verify_ssl", True)),
    )
    return Orchestrator(
        sources=load_sources(config),
        fetcher=SourceFetcher(http_client, parser=config.get("parser", "lxml")),
        store=store,
        config=config,
    )


def _setup_logging_from(config: dict) -> None:
    log_config = config.get("logging", {})
    setup_logging(level=log_config.get("level", "INFO"), log_file=log_config.get("file"))


def cmd_serve(args) -> int:
    """Start the API server; the first scrape runs in the background."""
    import uvicorn

    from nuc_universities.api.app import create_app

    config = load_config(
        config_path=getattr(args, "config", None),
        cli_overrides={"host": args.host, "port": args.port},
    )
    _setup_logging_from(config)

    try:
        orchestrator = build_orchestrator(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    app = create_app(
        orchestrator,
        refresh_interval=float(config.get("refresh_interval", 0)),
    )
    host = config.get("host", "0.0.0.0")
    port = int(config.get("port", 3000))
    print(f"Nigerian Universities API running on port {port}")
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


def cmd_scrape(args) -> int:
    """Run one scrape cycle synchronously and report it."""
    config = load_config(config_path=getattr(args, "config", None))
    _setup_logging_from(config)

    try:
        orchestrator = build_orchestrator(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    try:
        summary = orchestrator.run_cycle()
    finally:
        orchestrator.fetcher.client.close()

    snapshot = orchestrator.store.snapshot
    _print_summary(summary)
    if args.limit:
        _print_universities(snapshot.universities[: args.limit], total=len(snapshot))

    if args.output:
        written = export_universities(
            args.output,
            snapshot.universities,
            meta={
                "cycle": snapshot.cycle,
                "completed_at": snapshot.completed_at.isoformat() if snapshot.completed_at else None,
                "errors": [{"url": e.url, "message": e.message} for e in snapshot.errors],
            },
        )
        print(f"Wrote {written} universities to {args.output}")

    # Partial failure still counts as a usable run; total failure doesn't
    return 1 if summary.succeeded == 0 and summary.failed else 0


def cmd_sources(args) -> int:
    """Print the configured source table."""
    config = load_config(config_path=getattr(args, "config", None))
    try:
        sources = load_sources(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    table = Table(title="Configured sources")
    table.add_column("Type", style="bold cyan")
    table.add_column("URL")
    for source in sources:
        table.add_row(source.university_type.value, source.url)
    console.print(table)
    return 0


def _print_summary(summary: CycleSummary) -> None:
    print(f"\nScrape cycle {summary.cycle} complete ({summary.elapsed:.1f}s):")
    print(f"  Universities: {summary.count}")
    print(f"  Sources OK:   {summary.succeeded}")
    print(f"  Sources failed: {summary.failed}")
    for error in summary.errors:
        print(f"    - {error}")


def _print_universities(universities, total: int) -> None:
    table = Table(title=f"Universities (showing {len(universities)} of {total})")
    table.add_column("Abbr.", style="bold cyan")
    table.add_column("Name")
    table.add_column("City")
    table.add_column("State")
    table.add_column("Type")
    table.add_column("Est.")
    for u in universities:
        table.add_row(
            u.abbreviation, u.name, u.city, u.state, u.university_type, u.year_of_establishment
        )
    console.print(table)


if __name__ == "__main__":
    raise SystemExit(main())
