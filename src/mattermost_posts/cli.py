from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .models import ClientPost
from .parser import load_posts_file
from .posts import convert, convert_posts

console = Console(stderr=True)


def describe_post(post: ClientPost) -> str:
    """Summarise a converted post on one line of console markup."""
    author = post.user_override or post.user_id or "unknown"
    blocks = ", ".join(b.get("type", "?") for b in post.body) or "empty"
    reply = f" ↳ {escape(post.reply_to)}" if post.reply_to else ""
    return (
        f"[bold]{post.type.name}[/] {escape(author)} "
        f"[dim]{escape(post.post_id)}{reply}[/]: {blocks}"
    )


def main() -> None:
    """Convert a Mattermost post dump and summarise the result."""
    parser = argparse.ArgumentParser(
        description="Convert a Mattermost post dump into client posts.",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="path",
        required=True,
        type=Path,
        help="Path to a JSON file holding a PostList, a list of posts or one post.",
    )
    parser.add_argument(
        "--parents",
        action="store_true",
        help="Link replies to their parent post.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each conversion.",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console)],
        )

    path: Path = args.path
    if not path.exists():
        console.print(f"[red bold]Error:[/] File not found: {path}")
        raise SystemExit(1)

    try:
        posts = load_posts_file(path)
    except (KeyError, ValueError) as e:
        console.print(
            f"[red bold]Error:[/] Could not read posts from {path}: {escape(str(e))}"
        )
        raise SystemExit(1)

    if not posts:
        console.print("[red bold]Error:[/] No posts found in file.")
        raise SystemExit(1)

    if args.parents:
        client_posts = convert_posts(posts)
    else:
        client_posts = [convert(p) for p in posts]

    for client_post in client_posts:
        console.print(f"  {describe_post(client_post)}")

    console.print(f"[green bold]Done.[/] {len(client_posts)} posts converted.")
