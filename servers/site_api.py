"""
Seller Lead Gateway — HTTP Server Entrypoint
=============================================

Run:
    python -m servers.site_api
    python -m servers.site_api --host 127.0.0.1 --port 8080

Configuration comes from the environment; see shared/config.py.
"""

import argparse

import uvicorn

from .app import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Seller Lead Gateway HTTP server")
    parser.add_argument("--port", type=int, default=8000, help="HTTP port (default: 8000)")
    parser.add_argument("--host", default="0.0.0.0", help="HTTP host (default: 0.0.0.0)")
    parser.add_argument(
        "--proxy-headers", action="store_true",
        help="Trust X-Forwarded-* headers (when running behind a reverse proxy)",
    )
    args = parser.parse_args()

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        proxy_headers=args.proxy_headers,
        log_config=None,
    )


if __name__ == "__main__":
    main()
