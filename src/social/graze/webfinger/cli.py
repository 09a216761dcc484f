import argparse
import asyncio
import json
import logging
from logging.config import dictConfig
import os
from typing import List, Optional

import aiohttp
import redis.asyncio as redis
import sentry_sdk

from social.graze.webfinger.config import Settings, create_webfinger
from social.graze.webfinger.discover.client import WebFinger
from social.graze.webfinger.discover.reaction import Reaction
from social.graze.webfinger.xrd.detect import DataFormat
from social.graze.webfinger.xrd.serializer import serialize

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig()
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webfinger", description="Discover WebFinger documents"
    )
    parser.add_argument("subject", nargs="+", help="The identifier(s) to finger.")
    parser.add_argument(
        "--format",
        choices=[data_format.name for data_format in DataFormat],
        default=DataFormat.json.name,
        help="Output format of the discovered documents.",
    )
    parser.add_argument(
        "--fallback-to-http",
        action="store_true",
        default=None,
        help="Retry WebFinger over plain HTTP (development only).",
    )
    return parser


def render_reaction(react: Reaction, data_format: DataFormat) -> str:
    lines = [
        f"url: {react.url}",
        f"secure: {react.secure}",
    ]
    if react.error is not None:
        lines.append(f"error: {react.error}")
        cause = react.error.cause
        while cause is not None:
            lines.append(f"  caused by: {cause}")
            cause = cause.__cause__
    lines.append(serialize(react, data_format))
    return "\n".join(lines)


async def finger_all(
    webfinger: WebFinger, subjects: List[str], data_format: DataFormat
) -> List[Optional[Reaction]]:
    results: List[Optional[Reaction]] = []
    for subject in subjects:
        try:
            react = await webfinger.finger(subject)
            print(render_reaction(react, data_format))
            results.append(react)
        except Exception:
            logging.exception("Exception fingering subject %s", subject)
            results.append(None)
    return results


async def realMain(argv: Optional[List[str]] = None) -> None:
    args = vars(build_parser().parse_args(argv))

    settings = Settings()
    if args.get("fallback_to_http") is not None:
        settings.fallback_to_http = True

    configure_logging(settings.debug)

    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn)

    redis_client: Optional[redis.Redis] = None
    if settings.redis_dsn is not None:
        redis_client = redis.Redis.from_url(str(settings.redis_dsn))

    try:
        async with aiohttp.ClientSession() as session:
            webfinger = create_webfinger(settings, session, redis_client)
            await finger_all(
                webfinger, args.get("subject", []), DataFormat[args["format"]]
            )
    finally:
        if redis_client is not None:
            await redis_client.aclose()


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
