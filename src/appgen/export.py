"""Read-side helpers: share links, usage summaries and history export."""

import json

from .backends.http import artifact_path
from .core import Usage, Version


def artifact_url(public_url: str, session_id: str, version_label: str) -> str:
    """Return the link used by the share and open-externally buttons."""
    return artifact_path(public_url, session_id, version_label)


def format_usage(usage: Usage | None) -> str:
    """Summarise usage as e.g. ``"850ms • 1200 tokens/sec"``."""
    if usage is None:
        return ""
    millis = round(usage.total_time * 1000)
    if usage.total_time > 0:
        rate = f"{round(usage.total_tokens / usage.total_time)} tokens/sec"
    else:
        rate = f"{usage.total_tokens} tokens"
    return f"{millis}ms • {rate}"


def history_to_markdown(session_id: str, query: str, versions: list[Version]) -> str:
    """Export a session's versions as Markdown."""
    lines = [f"# Session {session_id}", ""]
    if query:
        lines.append(f"**Query:** {query}")
    lines.append(f"**Versions:** {len(versions)}")
    lines.extend(["", "---", ""])

    for version in versions:
        lines.append(f"## Version {version.version_label}")
        lines.append("")
        summary = format_usage(version.usage)
        if summary:
            lines.extend([f"_{summary}_", ""])
        lines.extend(["```html", version.html, "```", ""])
        if version.feedback:
            lines.append(f"**Feedback:** {version.feedback}")
            lines.append("")
        lines.extend(["---", ""])

    return "\n".join(lines)


def history_to_json(session_id: str, query: str, versions: list[Version]) -> str:
    """Export a session's versions as structured JSON."""
    data = {
        "session": {
            "id": session_id,
            "query": query,
            "version_count": len(versions),
        },
        "versions": [
            {
                "version": v.version_label,
                "html": v.html,
                "feedback": v.feedback,
                "usage": v.usage.to_dict() if v.usage else None,
            }
            for v in versions
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
