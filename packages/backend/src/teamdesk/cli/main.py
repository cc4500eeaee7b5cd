"""TeamDesk CLI — talk to a running TeamDesk server from the terminal.

Usage:
    teamdesk health                                   # Server + database status
    teamdesk register a@x.com -p secret --team Sales  # Create account, print token
    teamdesk login a@x.com -p secret                  # Print a fresh token
    export TEAMDESK_TOKEN=...                         # Use it for the rest
    teamdesk me                                       # Who am I (token claims)
    teamdesk members                                  # My team
    teamdesk tasks list                               # Team tasks
    teamdesk tasks add "Follow up" --priority high    # Create a task
    teamdesk tasks update <id> --status completed     # Partial update
    teamdesk tasks rm <id>                            # Delete
    teamdesk projects list | add | update | rm
    teamdesk projects update <id> --progress 40       # Partial update
    teamdesk leads list | add | update | rm
    teamdesk leads update <id> --status won           # Advance the pipeline
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:5001"


def _api_url() -> str:
    return os.environ.get("TEAMDESK_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the TeamDesk backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _token(ctx: click.Context) -> str:
    """Resolve the bearer token from --token or TEAMDESK_TOKEN."""
    token = ctx.obj.get("token") if ctx.obj else None
    if not token:
        raise click.ClickException("--token required (or set TEAMDESK_TOKEN env var)")
    return token


def _check(r: httpx.Response) -> dict | list | None:
    """Return the JSON body, or fail with the API error message (exit 1)."""
    if r.status_code == 204:
        return None
    if r.is_success:
        return r.json()
    try:
        message = r.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = r.text or r.reason_phrase
    raise click.ClickException(f"({r.status_code}) {message}")


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


async def _get(ctx: click.Context, path: str):
    async with _client(_token(ctx)) as c:
        return _check(await c.get(path))


async def _send(ctx: click.Context, method: str, path: str, body: Optional[dict] = None):
    async with _client(_token(ctx)) as c:
        return _check(await c.request(method, path, json=body))


def _drop_none(body: dict) -> dict:
    return {k: v for k, v in body.items() if v is not None}


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="teamdesk")
@click.option("--token", envvar="TEAMDESK_TOKEN", help="Bearer token (or set TEAMDESK_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of tables")
@click.pass_context
def main(ctx: click.Context, token: Optional[str], as_json: bool):
    """TeamDesk — team-shared tasks, projects, and leads."""
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["json"] = as_json


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@main.command()
def health():
    """Show server health."""

    async def _impl():
        async with _client() as c:
            return _check(await c.get("/api/health"))

    data = _run(_impl())
    color = "green" if data.get("status") == "ok" else "yellow"
    click.secho(f"status:   {data.get('status')}", fg=color)
    click.echo(f"database: {data.get('database')}")
    click.echo(f"version:  {data.get('version')}")


@main.command()
@click.argument("email")
@click.option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--name", "-n", help="Display name (defaults to the email's local part)")
@click.option("--team", "-t", "team_name", help="Team to join or create")
def register(email: str, password: str, name: Optional[str], team_name: Optional[str]):
    """Create an account and print its token."""

    async def _impl():
        async with _client() as c:
            return _check(await c.post("/api/auth/register", json=_drop_none({
                "email": email,
                "password": password,
                "name": name,
                "teamName": team_name,
            })))

    data = _run(_impl())
    user = data["user"]
    click.secho(f"Registered {user['email']} in team '{user['teamName']}'", fg="green", err=True)
    click.echo(data["token"])


@main.command()
@click.argument("email")
@click.option("--password", "-p", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a fresh token."""

    async def _impl():
        async with _client() as c:
            return _check(await c.post(
                "/api/auth/login", json={"email": email, "password": password},
            ))

    data = _run(_impl())
    click.secho(f"Logged in as {data['user']['email']}", fg="green", err=True)
    click.echo(data["token"])


@main.command()
@click.pass_context
def me(ctx: click.Context):
    """Show the identity carried by the token."""
    data = _run(_get(ctx, "/api/auth/me"))
    click.echo(_pretty_json(data["user"]))


@main.command()
@click.pass_context
def members(ctx: click.Context):
    """List the members of your team."""
    rows = _run(_get(ctx, "/api/team/members"))
    if ctx.obj["json"]:
        click.echo(_pretty_json(rows))
        return
    _print_table(rows, [("NAME", "name", 20), ("EMAIL", "email", 30), ("ROLE", "role", 8)])


# ---------------------------------------------------------------------------
# Team resources
# ---------------------------------------------------------------------------


def _list_cmd(group: click.Group, path: str, columns: list[tuple[str, str, int]]):
    @group.command("list")
    @click.pass_context
    def list_cmd(ctx: click.Context):
        rows = _run(_get(ctx, path))
        if ctx.obj["json"]:
            click.echo(_pretty_json(rows))
        elif not rows:
            click.echo("Nothing here yet.")
        else:
            _print_table(rows, columns)

    list_cmd.help = f"List your team's {path.rsplit('/', 1)[-1]}."
    return list_cmd


def _rm_cmd(group: click.Group, path: str):
    @group.command("rm")
    @click.argument("record_id")
    @click.pass_context
    def rm_cmd(ctx: click.Context, record_id: str):
        _run(_send(ctx, "DELETE", f"{path}/{record_id}"))
        click.secho(f"Deleted {record_id}", fg="green")

    rm_cmd.help = "Delete a record by id."
    return rm_cmd


@main.group()
def tasks():
    """Team tasks."""


_list_cmd(tasks, "/api/tasks", [
    ("ID", "id", 36), ("TITLE", "title", 30), ("STATUS", "status", 12),
    ("PRIORITY", "priority", 8), ("ASSIGNEE", "assignee", 16),
])
_rm_cmd(tasks, "/api/tasks")


@tasks.command("add")
@click.argument("title")
@click.option("--description", "-d")
@click.option("--priority", type=click.Choice(["low", "medium", "high", "urgent"]))
@click.option("--assignee", "-a")
@click.option("--due", "due_date", help="Due date (ISO 8601)")
@click.pass_context
def tasks_add(ctx, title, description, priority, assignee, due_date):
    """Create a task."""
    task = _run(_send(ctx, "POST", "/api/tasks", _drop_none({
        "title": title,
        "description": description,
        "priority": priority,
        "assignee": assignee,
        "dueDate": due_date,
    })))
    click.secho(f"Task {task['id']} created", fg="green")


@tasks.command("update")
@click.argument("record_id")
@click.option("--title")
@click.option("--status")
@click.option("--priority", type=click.Choice(["low", "medium", "high", "urgent"]))
@click.option("--assignee", "-a")
@click.pass_context
def tasks_update(ctx, record_id, title, status, priority, assignee):
    """Update a task's fields."""
    body = _drop_none({
        "title": title, "status": status, "priority": priority, "assignee": assignee,
    })
    if not body:
        raise click.UsageError("Nothing to update — pass at least one option.")
    task = _run(_send(ctx, "PUT", f"/api/tasks/{record_id}", body))
    click.secho(f"Task {task['id']} updated ({task['status']})", fg="green")


@main.group()
def projects():
    """Team projects."""


_list_cmd(projects, "/api/projects", [
    ("ID", "id", 36), ("NAME", "name", 30), ("CLIENT", "client", 16),
    ("STATUS", "status", 10), ("PROGRESS", "progress", 8),
])
_rm_cmd(projects, "/api/projects")


@projects.command("add")
@click.argument("name")
@click.option("--client", "-c")
@click.option("--description", "-d")
@click.option("--priority", type=click.Choice(["low", "medium", "high", "urgent"]))
@click.pass_context
def projects_add(ctx, name, client, description, priority):
    """Create a project."""
    project = _run(_send(ctx, "POST", "/api/projects", _drop_none({
        "name": name, "client": client, "description": description, "priority": priority,
    })))
    click.secho(f"Project {project['id']} created", fg="green")


@projects.command("update")
@click.argument("record_id")
@click.option("--name")
@click.option("--status")
@click.option("--progress", type=click.IntRange(0, 100))
@click.option("--priority", type=click.Choice(["low", "medium", "high", "urgent"]))
@click.option("--client", "-c")
@click.pass_context
def projects_update(ctx, record_id, name, status, progress, priority, client):
    """Update a project's fields."""
    body = _drop_none({
        "name": name, "status": status, "progress": progress,
        "priority": priority, "client": client,
    })
    if not body:
        raise click.UsageError("Nothing to update — pass at least one option.")
    project = _run(_send(ctx, "PUT", f"/api/projects/{record_id}", body))
    click.secho(
        f"Project {project['id']} updated ({project['status']}, {project['progress']}%)",
        fg="green",
    )


@main.group()
def leads():
    """Team sales leads."""


_list_cmd(leads, "/api/leads", [
    ("ID", "id", 36), ("COMPANY", "company", 24), ("CONTACT", "contact", 20),
    ("STATUS", "status", 12), ("VALUE", "value", 10),
])
_rm_cmd(leads, "/api/leads")


@leads.command("add")
@click.argument("company")
@click.argument("contact")
@click.option("--email", "contact_email")
@click.option("--value", type=float)
@click.option("--probability", type=click.IntRange(0, 100))
@click.pass_context
def leads_add(ctx, company, contact, contact_email, value, probability):
    """Create a lead."""
    lead = _run(_send(ctx, "POST", "/api/leads", _drop_none({
        "company": company,
        "contact": contact,
        "contactEmail": contact_email,
        "value": value,
        "probability": probability,
    })))
    click.secho(f"Lead {lead['id']} created", fg="green")


@leads.command("update")
@click.argument("record_id")
@click.option("--status")
@click.option("--value", type=float)
@click.option("--probability", type=click.IntRange(0, 100))
@click.option("--contact")
@click.option("--email", "contact_email")
@click.pass_context
def leads_update(ctx, record_id, status, value, probability, contact, contact_email):
    """Move a lead through the pipeline or edit its details."""
    body = _drop_none({
        "status": status,
        "value": value,
        "probability": probability,
        "contact": contact,
        "contactEmail": contact_email,
    })
    if not body:
        raise click.UsageError("Nothing to update — pass at least one option.")
    lead = _run(_send(ctx, "PUT", f"/api/leads/{record_id}", body))
    click.secho(f"Lead {lead['id']} updated ({lead['status']})", fg="green")


if __name__ == "__main__":
    main()
