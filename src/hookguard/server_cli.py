"""CLI entry point for the webhook server."""

import argparse

from hookguard.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="hookguard-server",
        description="Signed webhook receiver with transaction signing trigger",
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind host (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    args = parser.parse_args(argv)

    import uvicorn

    uvicorn.run("hookguard.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
