from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from typedrest.client.resource_client import ResourceClient, clients_for
from typedrest.config import ClientSettings
from typedrest.orchestrator.parallel import gather_all
from typedrest.resources.jsonplaceholder import Album, Comment, Post, User
from typedrest.resources.model import Resource
from typedrest.result import Failure, OperationResult
from typedrest.transport.http import Transport


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()

MODELS = (Post, User, Comment, Album)


@app.callback()
def _main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request"),
    host: Optional[str] = typer.Option(None, help="API host (default: $TYPEDREST_HOST or JSONPlaceholder)"),
    timeout: Optional[float] = typer.Option(None, help="Per-request timeout in seconds"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    settings = ClientSettings.from_env()
    overrides: dict[str, Any] = {}
    if host:
        overrides["host"] = host
    if timeout:
        overrides["timeout"] = timeout
    ctx.obj = settings.model_copy(update=overrides) if overrides else settings


def _run(ctx: typer.Context, body: Callable[[dict[str, ResourceClient]], Awaitable[Any]]) -> Any:
    async def go() -> Any:
        async with Transport(ctx.obj) as transport:
            return await body(clients_for(transport, MODELS))

    return asyncio.run(go())


def _client(clients: dict[str, ResourceClient], resource: str) -> ResourceClient:
    if resource not in clients:
        raise typer.BadParameter(f"resource must be one of: {', '.join(sorted(clients))}")
    return clients[resource]


def _value_or_exit(result: OperationResult[Any]) -> Any:
    if isinstance(result, Failure):
        console.print(f"[bold red]{result.kind.value}[/bold red]: {result.message}")
        raise typer.Exit(code=1)
    return result.value


def _print_records(records: list[Resource], format: str) -> None:
    if format.lower() == "json":
        console.print(
            json.dumps([r.model_dump(by_alias=True, mode="json") for r in records], indent=2),
            markup=False,
            highlight=False,
        )
        return
    if not records:
        console.print("(no records)")
        return

    columns = list(type(records[0]).model_fields)
    table = Table(show_header=True, header_style="bold")
    for col in columns:
        table.add_column(col.upper(), no_wrap=col == "id")
    for r in records:
        table.add_row(*(str(getattr(r, c)) for c in columns))
    console.print(table)


@app.command()
def get(
    ctx: typer.Context,
    resource_id: str = typer.Argument(..., help="Record id"),
    resource: str = typer.Option("posts", help="Collection: posts|users|comments|albums"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    result = _run(ctx, lambda c: _client(c, resource).get(resource_id))
    _print_records([_value_or_exit(result)], format)


@app.command("list")
def list_records(
    ctx: typer.Context,
    resource: str = typer.Option("posts", help="Collection: posts|users|comments|albums"),
    user_id: Optional[int] = typer.Option(None, help="Filter by userId"),
    post_id: Optional[int] = typer.Option(None, help="Filter by postId"),
    page: Optional[int] = typer.Option(None, help="1-based page number"),
    per_page: int = typer.Option(10, help="Page size when --page is given"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    filters: dict[str, Any] = {}
    if user_id is not None:
        filters["userId"] = user_id
    if post_id is not None:
        filters["postId"] = post_id

    def op(clients: dict[str, ResourceClient]) -> Awaitable[OperationResult[list]]:
        client = _client(clients, resource)
        if page is not None:
            return client.list_page(page, per_page, filters)
        return client.list(filters)

    records = _value_or_exit(_run(ctx, op))
    console.print(f"[bold]{resource}:[/bold] {len(records)}")
    _print_records(records, format)


@app.command()
def create(
    ctx: typer.Context,
    title: str = typer.Option(..., help="Post title"),
    body: str = typer.Option(..., help="Post body"),
    user_id: int = typer.Option(1, help="Author userId"),
) -> None:
    post = Post(title=title, body=body, user_id=user_id)
    created = _value_or_exit(_run(ctx, lambda c: c["posts"].create(post)))
    console.print(f"[bold green]Created[/bold green] post with id {created.id}")


@app.command()
def delete(
    ctx: typer.Context,
    resource_id: str = typer.Argument(..., help="Record id"),
    resource: str = typer.Option("posts", help="Collection: posts|users|comments|albums"),
) -> None:
    _value_or_exit(_run(ctx, lambda c: _client(c, resource).delete(resource_id)))
    console.print(f"[bold green]Deleted[/bold green] {resource}/{resource_id}")


@app.command("fetch-many")
def fetch_many(
    ctx: typer.Context,
    ids: list[str] = typer.Argument(..., help="Record ids, fetched concurrently"),
    resource: str = typer.Option("posts", help="Collection: posts|users|comments|albums"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    started = time.perf_counter()
    records = _value_or_exit(_run(ctx, lambda c: _client(c, resource).fetch_many(ids)))
    elapsed_ms = (time.perf_counter() - started) * 1000
    _print_records(records, format)
    console.print(f"Fetched {len(records)} records in {elapsed_ms:.0f}ms")


@app.command()
def demo(
    ctx: typer.Context,
    user_id: int = typer.Option(1, help="User whose dashboard is fetched"),
) -> None:
    """Walk through create / read / list / update / delete and a parallel fetch."""

    async def walkthrough(clients: dict[str, ResourceClient]) -> None:
        posts = clients["posts"]

        console.print("[bold][1/6] CREATE[/bold]")
        created = _value_or_exit(await posts.create(Post(title="My New Post", body="Hello!", user_id=user_id)))
        console.print(f"      created post with id {created.id}")

        console.print("[bold][2/6] READ[/bold]")
        post = _value_or_exit(await posts.get(1))
        console.print(f"      title: {post.title}")

        console.print("[bold][3/6] READ LIST[/bold]")
        mine = _value_or_exit(await posts.list({"userId": user_id}))
        console.print(f"      found {len(mine)} posts by user {user_id}")

        console.print("[bold][4/6] UPDATE[/bold]")
        updated = _value_or_exit(await posts.update(post.model_copy(update={"title": f"Updated: {post.title}"})))
        console.print(f"      new title: {updated.title}")

        console.print("[bold][5/6] DELETE[/bold]")
        _value_or_exit(await posts.delete(1))
        console.print("      deleted post 1")

        console.print("[bold][6/6] PARALLEL[/bold]")
        started = time.perf_counter()
        user, user_posts, albums = _value_or_exit(
            await gather_all(
                clients["users"].get(user_id),
                posts.list({"userId": user_id}),
                clients["albums"].list({"userId": user_id}),
            )
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        console.print(f"      {user.name} ({user.email}): {len(user_posts)} posts, {len(albums)} albums")
        console.print(f"      time: {elapsed_ms:.0f}ms")

    _run(ctx, walkthrough)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
