from __future__ import annotations

import argparse

import uvicorn

from articles_api.config import get_settings
from articles_api.docs import routes_markdown
from articles_api.main import create_app
from articles_api.observability.logging import configure_logging, resolve_level


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Articles REST example service")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Application port")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level name, e.g. DEBUG or INFO")
    parser.add_argument(
        "--routes",
        action=argparse.BooleanOptionalAction,
        default=settings.routes,
        help="Print router documentation and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    app = create_app()

    if args.routes:
        print(routes_markdown(app))
        return

    configure_logging(resolve_level(args.log_level))
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
