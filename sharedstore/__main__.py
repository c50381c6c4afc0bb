"""
Run one of the services with uvicorn.

Usage:
    python -m sharedstore users     # APP_NAME, PORT, DB_* from the environment
    python -m sharedstore cache     # REDIS_URL, PORT from the environment

Run two `users` processes with different APP_NAME/PORT against the same
DB_* settings to get two independent services sharing one database.
"""

import argparse

import uvicorn

from sharedstore.config import settings
from sharedstore.main import setup_logging

APPS = {
    "users": "sharedstore.main:user_app",
    "cache": "sharedstore.main:cache_app",
}


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="sharedstore", description=__doc__.splitlines()[1])
    parser.add_argument("service", choices=sorted(APPS), help="which service to run")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)

    # Startup failure inside the lifespan (e.g. Redis unreachable) makes
    # uvicorn exit with a non-zero status
    uvicorn.run(
        APPS[args.service],
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
