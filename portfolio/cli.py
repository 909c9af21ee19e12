"""
Admin command line for managing site themes through the API.

    portfolio-admin themes list
    portfolio-admin themes create "Sunset" --primary "#ff7e5f" ...
    portfolio-admin themes activate <id>
    portfolio-admin themes delete <id>
    portfolio-admin themes css

Writes need a session: pass --token (or PORTFOLIO_ADMIN_TOKEN), or
--email/--password (or ADMIN_EMAIL/ADMIN_PASSWORD) to log in first.
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from .client.api_client import ApiError, ThemeApiClient
from .client.state import ThemeState
from .core.config import settings
from .models.theme import THEME_VARIABLE_NAMES
from .themes.applier import render_css


def format_theme_table(state: ThemeState) -> str:
    if not state.themes:
        return "No themes found"
    lines = []
    for theme in state.themes:
        marker = "*" if theme.is_active else " "
        colours = " ".join(getattr(theme.variables, name) for name in THEME_VARIABLE_NAMES)
        lines.append(f"{marker} {theme.id}  {theme.name:<20} {colours}")
    return "\n".join(lines)


async def _authenticate(client: ThemeApiClient, args) -> None:
    if client.token:
        return
    email = args.email or os.getenv("ADMIN_EMAIL")
    password = args.password or os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        raise ApiError("Authentication required: pass --token or --email/--password", status_code=401)
    await client.login(email, password)


async def _refresh(client: ThemeApiClient, state: ThemeState) -> None:
    state.set_themes(await client.list_themes())
    active = next((t for t in state.themes if t.is_active), None)
    state.set_active_theme(active)


async def run(args) -> int:
    state = ThemeState()
    token = args.token or os.getenv("PORTFOLIO_ADMIN_TOKEN")

    async with ThemeApiClient(base_url=args.base_url, token=token) as client:
        if args.action == "list":
            await _refresh(client, state)
            print(format_theme_table(state))
            return 0

        if args.action == "css":
            print(render_css(await client.get_active_theme()), end="")
            return 0

        await _authenticate(client, args)

        if args.action == "create":
            variables = {name: getattr(args, name) for name in THEME_VARIABLE_NAMES}
            theme = await client.create_theme(args.name, variables)
            print(f"Created theme {theme.name} ({theme.id})")
        elif args.action == "activate":
            theme = await client.activate_theme(args.theme_id)
            state.apply_activation(theme)
            print(f"Activated theme {theme.name}")
        elif args.action == "delete":
            await client.delete_theme(args.theme_id)
            print(f"Deleted theme {args.theme_id}")

        # The list view is refreshed after every write
        await _refresh(client, state)
        print(format_theme_table(state))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="portfolio-admin", description="Manage portfolio site themes")
    parser.add_argument("--base-url", default=settings.API_BASE_URL, help="API base URL")
    parser.add_argument("--token", help="Session token")
    parser.add_argument("--email", help="Admin email used to log in")
    parser.add_argument("--password", help="Admin password used to log in")

    resources = parser.add_subparsers(dest="resource", required=True)
    themes = resources.add_parser("themes", help="Theme management")
    actions = themes.add_subparsers(dest="action", required=True)

    actions.add_parser("list", help="List themes; the active one is starred")
    actions.add_parser("css", help="Print the active theme as CSS variables")

    create = actions.add_parser("create", help="Create a theme")
    create.add_argument("name")
    for name in THEME_VARIABLE_NAMES:
        create.add_argument(f"--{name}", required=True, help=f"{name} colour")

    activate = actions.add_parser("activate", help="Activate a theme")
    activate.add_argument("theme_id")

    delete = actions.add_parser("delete", help="Delete a theme")
    delete.add_argument("theme_id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ApiError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
