"""Main entry point for the pages CLI."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from engine.composer.defaults import seed_templates
from engine.composer.gateway import (
    GatewayError,
    HttpTemplateStore,
    TemplateGateway,
    filter_templates,
    template_stats,
)
from engine.composer.renderer import render_page
from engine.composer.types import CATEGORY_LABELS, VIEWPORTS, RenderOptions
from pages_cli import __version__
from pages_cli.config import Config

COMMANDS = ("list", "show", "render", "duplicate", "delete", "apply", "token", "logout")

# Commands that take a template id (or token value) as their one argument
_NEEDS_ARG = {"show", "render", "duplicate", "delete", "apply", "token"}


def print_help():
    """Print help message."""
    print(f"""
Storefront pages CLI v{__version__}

Usage:
  pages [options] <command> [args]

Commands:
  list                  List templates
  show <id>             Show a template and its components
  render <id>           Render a template to HTML (stdout or --out)
  duplicate <id>        Copy a template
  delete <id>           Delete a template (default templates are protected)
  apply <id>            Record a use of the template on a live page
  token <value>         Store an API token for the current API URL
  logout                Forget the token for the current API URL

Options:
  --api-url URL         Override API endpoint
  --search TERM         (list) filter by name or description
  --category NAME       (list) filter by category
  --out FILE            (render) write HTML to a file
  --seed N              (render) seed for sample content
  --viewport NAME       (render) desktop, tablet or mobile
  -h, --help            Show this help
  -v, --version         Show version

Environment:
  PAGES_API_URL         Override API endpoint (same as --api-url)
  PAGES_API_TOKEN       Bearer token for the API
""")


def parse_args(args: list[str]) -> dict:
    """
    Parse command line arguments.

    Returns dict with:
        command: str | None
        target: str | None (template id, or token value)
        api_url, search, category, out, viewport: str | None
        seed: int | None
        show_help, show_version: bool
    """
    result = {
        "command": None,
        "target": None,
        "api_url": None,
        "search": None,
        "category": None,
        "out": None,
        "seed": None,
        "viewport": None,
        "show_help": False,
        "show_version": False,
    }
    valued = {"--api-url": "api_url", "--search": "search", "--category": "category", "--out": "out",
              "--seed": "seed", "--viewport": "viewport"}

    i = 0
    while i < len(args):
        arg = args[i]

        if arg in valued:
            if i + 1 >= len(args):
                print(f"Error: {arg} requires a value")
                sys.exit(1)
            result[valued[arg]] = args[i + 1]
            i += 1
        elif arg in ("--help", "-h"):
            result["show_help"] = True
        elif arg in ("--version", "-v"):
            result["show_version"] = True
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}")
            print("Run 'pages --help' for usage.")
            sys.exit(1)
        elif result["command"] is None:
            if arg not in COMMANDS:
                print(f"Unknown command: {arg}")
                print("Run 'pages --help' for usage.")
                sys.exit(1)
            result["command"] = arg
        elif result["target"] is None and result["command"] in _NEEDS_ARG:
            result["target"] = arg
        else:
            print(f"Unexpected argument: {arg}")
            sys.exit(1)

        i += 1

    if result["seed"] is not None:
        try:
            result["seed"] = int(result["seed"])
        except ValueError:
            print("Error: --seed must be an integer")
            sys.exit(1)
    if result["viewport"] is not None and result["viewport"] not in VIEWPORTS:
        print(f"Error: --viewport must be one of {', '.join(sorted(VIEWPORTS))}")
        sys.exit(1)
    if result["command"] in _NEEDS_ARG and result["target"] is None and not result["show_help"]:
        print(f"Error: {result['command']} requires an argument")
        sys.exit(1)

    return result


# ── commands ────────────────────────────────────────────────────────────────


async def cmd_list(gateway: TemplateGateway, args: dict) -> int:
    templates = await gateway.list()
    shown = filter_templates(templates, args["search"] or "", args["category"] or "all")
    if not shown:
        print("No templates found.")
        return 0

    print(f"  {'ID':<38} {'NAME':<28} {'CATEGORY':<15} {'USES':>5}")
    for t in shown:
        marker = "*" if t.is_default else " "
        category = CATEGORY_LABELS.get(t.category, t.category)
        print(f"{marker} {t.id:<38} {t.name[:28]:<28} {category:<15} {t.usage_count:>5}")

    stats = template_stats(templates)
    print(f"\n{stats['total']} templates, {stats['defaults']} default, {stats['usage']} uses (* = default)")
    return 0


async def cmd_show(gateway: TemplateGateway, args: dict) -> int:
    t = await gateway.get(args["target"])
    print(f"{t.name}{' (default)' if t.is_default else ''}")
    print(f"  id:          {t.id}")
    print(f"  category:    {CATEGORY_LABELS.get(t.category, t.category)}")
    print(f"  description: {t.description or '-'}")
    print(f"  updated:     {t.updated_at}")
    print(f"  uses:        {t.usage_count}")
    print(f"  components:  {len(t.components)}")
    for i, c in enumerate(t.components, 1):
        title = c.props.get("title") or c.props.get("content") or c.props.get("text") or ""
        print(f"    {i:>2}. {c.type:<13} {str(title)[:50]}")
    return 0


async def cmd_render(gateway: TemplateGateway, args: dict) -> int:
    t = await gateway.get(args["target"])
    opts = RenderOptions(seed=args["seed"], viewport=args["viewport"] or "desktop")
    html = render_page(t, opts)
    if args["out"]:
        Path(args["out"]).write_text(html, encoding="utf-8")
        print(f"Wrote {args['out']} ({len(html.encode())} bytes)")
    else:
        print(html)
    return 0


async def cmd_duplicate(gateway: TemplateGateway, args: dict) -> int:
    clone = await gateway.duplicate(args["target"])
    print(f"Created {clone.id}: {clone.name}")
    return 0


async def cmd_delete(gateway: TemplateGateway, args: dict) -> int:
    await gateway.delete(args["target"])
    print(f"Deleted {args['target']}")
    return 0


async def cmd_apply(gateway: TemplateGateway, args: dict) -> int:
    t = await gateway.apply(args["target"])
    print(f"Applied {t.name} (used {t.usage_count} times)")
    return 0


_HANDLERS = {
    "list": cmd_list,
    "show": cmd_show,
    "render": cmd_render,
    "duplicate": cmd_duplicate,
    "delete": cmd_delete,
    "apply": cmd_apply,
}


async def run(gateway: TemplateGateway, args: dict) -> int:
    """Run one gateway command. Returns the process exit code."""
    try:
        code = await _HANDLERS[args["command"]](gateway, args)
    except GatewayError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    for warning in gateway.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if gateway.unsynced:
        print(f"Warning: not saved to the server: {', '.join(sorted(gateway.unsynced))}", file=sys.stderr)
        code = code or 2
    return code


async def _run_remote(config: Config, args: dict) -> int:
    store = HttpTemplateStore(config.api_url, config.token)
    try:
        return await run(TemplateGateway(store, fallback=seed_templates()), args)
    finally:
        await store.aclose()


def main():
    """Main entry point."""
    args = parse_args(sys.argv[1:])

    if args["show_version"]:
        print(f"pages-cli {__version__}")
        return

    if args["show_help"] or args["command"] is None:
        print_help()
        return

    config = Config(api_url_override=args["api_url"])

    if args["command"] == "token":
        config.token = args["target"]
        print(f"Token saved for {config.api_url}")
        return

    if args["command"] == "logout":
        config.clear_environment()
        print(f"Logged out of {config.api_url}")
        return

    sys.exit(asyncio.run(_run_remote(config, args)))


if __name__ == "__main__":
    main()
