#!/usr/bin/env python3
"""
TokenGate -- account registration and signed bearer-token sessions.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables:
  ENVIRONMENT   "development" or "production" (default). Production requires
                JWT_SECRET and marks the session cookie Secure.
  JWT_SECRET    HS256 signing secret, at least 32 characters.
  HOST / PORT   Default bind address when --host / --port are not given.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the TokenGate API server.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
