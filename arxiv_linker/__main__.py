"""Simple CLI entrypoint for arxiv-linker.

Parses an arXiv reference, optionally exports it into a project, or lists the
projects assigned to a user.
"""
import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import get_settings
from .fetcher import HttpxTransport
from .joiner import resolve_assigned_projects
from .models import IngestResult, Source
from .pipeline import DEFAULT_SOURCES, ingest_reference, link_reference
from .reference import extract_identifier
from .store import SqliteDocumentStore

console = Console()


def _print_result(result: IngestResult) -> None:
    paper = result.paper
    if paper is None:
        return
    console.print(f"[bold]{paper.id}[/bold] ({result.source}): {paper.title}")
    console.print(f"  authors:    {', '.join(paper.authors)}")
    console.print(f"  submitted:  {paper.submitted_date}" + (f" (updated {paper.updated_date})" if paper.updated_date else ""))
    console.print(f"  categories: {', '.join(paper.categories)}")
    console.print(f"  pdf:        {paper.pdf_url}")
    if paper.doi:
        console.print(f"  doi:        {paper.doi}")


async def _reference_mode(args: argparse.Namespace) -> int:
    identifier = extract_identifier(args.reference)
    if identifier is None:
        console.print(f"[red]Not an arXiv abstract URL:[/red] {args.reference}")
        return 2

    sources = (Source(args.source),) if args.source else DEFAULT_SOURCES
    if args.dry_run:
        target = f" and export to project {args.export}" if args.export else ""
        console.print(f"[yellow]Dry run:[/yellow] would parse id={identifier} from {', '.join(s.value for s in sources)}{target}")
        return 0

    async with HttpxTransport(timeout=args.timeout, attempts=args.retries) as transport:
        if args.export:
            store = SqliteDocumentStore(args.db)
            await store.init()
            result = await link_reference(args.reference, args.export, args.user, transport, store, sources=sources)
        else:
            result = await ingest_reference(args.reference, args.user, transport, sources=sources)

    _print_result(result)
    if not result.success:
        console.print(f"[red]Failed:[/red] {result.error}")
        return 1
    if args.export:
        console.print(f"[green]Exported[/green] {identifier} to project {args.export}")
    return 0


async def _projects_mode(args: argparse.Namespace) -> int:
    if args.dry_run:
        console.print(f"[yellow]Dry run:[/yellow] would list projects assigned to {args.projects} from {args.db}")
        return 0

    store = SqliteDocumentStore(args.db)
    await store.init()
    try:
        projects = await resolve_assigned_projects(store, args.projects, chunk_size=args.chunk_size)
    except Exception as exc:
        console.print(f"[red]Loading projects failed:[/red] {exc}")
        return 1

    table = Table(title=f"Projects assigned to {args.projects}")
    for column in ("project", "title", "difficulty", "status", "tasks"):
        table.add_column(column)
    for p in projects:
        done = sum(1 for t in p.tasks if t.completed)
        table.add_row(p.project_id, p.title, p.difficulty, p.status, f"{done}/{len(p.tasks)}")
    console.print(table)
    return 0


async def run(args: argparse.Namespace) -> int:
    if args.projects:
        return await _projects_mode(args)
    return await _reference_mode(args)


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="arxiv-linker")
    parser.add_argument("--dry-run", action="store_true", help="Show actions without fetching or writing")
    parser.add_argument("--reference", help="arXiv abstract URL (e.g., https://arxiv.org/abs/2506.14767)")
    parser.add_argument("--source", choices=[s.value for s in Source], default=None, help="Only use this source (default: feed, then rendered page)")
    parser.add_argument("--export", metavar="PROJECT", help="Export the parsed paper into this project id")
    parser.add_argument("--projects", metavar="USER", help="List projects assigned to this user (mutually exclusive with --reference)")
    parser.add_argument("--db", default=settings.db_path, help="Path to the sqlite document store")
    parser.add_argument("--user", default=settings.user, help="Acting user id recorded on exported papers")
    parser.add_argument("--timeout", type=float, default=settings.http_timeout, help="HTTP timeout in seconds")
    parser.add_argument("--retries", type=int, default=settings.retry_attempts, help="Attempts per request on network errors")
    parser.add_argument("--chunk-size", type=int, default=settings.chunk_size, help="Project ids per batched lookup (max 10)")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(message)s", handlers=[RichHandler(console=console, show_path=False)])

    # Simple exclusivity: either --reference or --projects
    if args.reference and args.projects:
        console.print("[red]Specify either --reference or --projects (not both).[/red]")
        sys.exit(2)
    if not args.reference and not args.projects:
        parser.print_usage()
        sys.exit(2)

    if (args.export or args.projects) and not args.db:
        console.print("[red]--export and --projects require --db to point to a sqlite database file.[/red]")
        sys.exit(2)

    exit_code = asyncio.run(run(args))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
