from __future__ import annotations

from fastapi import FastAPI
from fastapi.dependencies.models import Dependant
from fastapi.routing import APIRoute


def _chain(dependant: Dependant) -> list[str]:
    names: list[str] = []
    for sub in dependant.dependencies:
        names.extend(_chain(sub))
        if sub.call is not None:
            names.append(getattr(sub.call, "__name__", type(sub.call).__name__))
    return names


def routes_markdown(app: FastAPI, intro: str = "Routing docs generated from the application router.") -> str:
    """Render the app's API routes as Markdown, one section per path."""
    lines = [f"# {app.title}", "", intro, "", "## Routes", ""]
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        lines.append(f"<details>\n<summary>`{route.path}`</summary>\n")
        for method in sorted(route.methods):
            lines.append(f"- **{method}**")
            for name in [*_chain(route.dependant), route.endpoint.__name__]:
                lines.append(f"  - `{name}`")
        lines.append("\n</details>")
    return "\n".join(lines) + "\n"
