"""Render social posts as publishable text and write them to disk."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping

PLATFORMS: tuple[str, ...] = ("twitter", "linkedin", "instagram", "youtube", "facebook")

CHARACTER_LIMITS: dict[str, int] = {
    "twitter": 280,
    "linkedin": 3000,
    "instagram": 2200,
    "youtube": 5000,
    "facebook": 63206,
}


def format_post(post: Any) -> str:
    """
    Flatten a post into the text a user would paste into the platform.

    Strings pass through. Structured posts become hook, content and call to
    action (each followed by a blank line, empty parts skipped) and then the
    space-joined hashtags.
    """
    if post is None:
        return ""
    if isinstance(post, str):
        return post
    if hasattr(post, "model_dump"):
        post = post.model_dump(by_alias=True)
    if not isinstance(post, Mapping):
        return str(post)

    formatted = ""
    for key in ("hook", "content", "callToAction"):
        value = post.get(key)
        if value:
            formatted += f"{value}\n\n"
    hashtags = post.get("hashtags") or []
    if hashtags:
        formatted += " ".join(str(tag) for tag in hashtags)
    return formatted.strip()


def character_limit(platform: str) -> int:
    """Return the platform's post length limit, or 0 for unknown platforms."""
    return CHARACTER_LIMITS.get(platform, 0)


def is_over_limit(platform: str, text: str) -> bool:
    return len(text) > character_limit(platform)


def post_filename(platform: str) -> str:
    return f"{platform}-post.txt"


def formatted_posts(social_posts: Mapping[str, Any]) -> Dict[str, str]:
    """Format every post in a socialPosts mapping, preserving its order."""
    return {platform: format_post(post) for platform, post in social_posts.items()}


def write_post_files(social_posts: Mapping[str, Any], outdir: Path) -> List[Path]:
    """Write one ``<platform>-post.txt`` per platform and return the paths."""
    outdir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for platform, text in formatted_posts(social_posts).items():
        path = outdir / post_filename(platform)
        path.write_text(text, encoding="utf-8")
        written.append(path)
    return written
