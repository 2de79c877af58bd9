"""Entry point — wires Config → MoonDream → one operation on an image file."""
import argparse
import asyncio
from dataclasses import replace
import logging
import os
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from moondream.client import MoonDream
from moondream.config import ClientConfig
from moondream.constants import (
    CLI_PROG,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_LEVEL,
    MSG_CLI_FAILED,
    MSG_CLI_STARTING,
)
from moondream.errors import MoondreamError
from moondream.models import (
    CaptionLength,
    CaptionResult,
    DetectResult,
    ImagePayload,
    PointResult,
    QueryResult,
)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=CLI_PROG, description="Moondream vision API client")
    parser.add_argument("--endpoint", help="self-hosted server URL (no authentication)")
    parser.add_argument("--token", help="API key for the hosted service")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds")

    commands = parser.add_subparsers(dest="command", required=True)

    point = commands.add_parser("point", help="centre points of an object")
    point.add_argument("image")
    point.add_argument("label")

    detect = commands.add_parser("detect", help="bounding boxes of an object")
    detect.add_argument("image")
    detect.add_argument("label")

    caption = commands.add_parser("caption", help="describe the image")
    caption.add_argument("image")
    caption.add_argument(
        "--length",
        choices=[m.value for m in CaptionLength],
        default=CaptionLength.NORMAL.value,
    )

    query = commands.add_parser("query", help="ask a question about the image")
    query.add_argument("image")
    query.add_argument("question")

    return parser


def resolve_config(args: argparse.Namespace) -> ClientConfig:
    """Command-line flags win over MOONDREAM_* environment variables."""
    options = {"timeout": args.timeout} if args.timeout is not None else {}
    match (args.endpoint, args.token):
        case (str() as endpoint, _):
            return ClientConfig.local(endpoint, **options)
        case (None, str() as token):
            return ClientConfig.remote(token, **options)
        case _:
            config = ClientConfig.from_env()
            match options:
                case {"timeout": timeout}:
                    return replace(config, timeout=timeout)
                case _:
                    return config


async def run(
    args: argparse.Namespace, client: MoonDream
) -> PointResult | DetectResult | CaptionResult | QueryResult:
    image = ImagePayload.from_file(args.image)
    match args.command:
        case "point":
            return await client.point(image, args.label)
        case "detect":
            return await client.detect(image, args.label)
        case "caption":
            return await client.caption(image, args.length)
        case "query":
            return await client.query(image, args.question)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    _setup_logging(os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL))
    logger = logging.getLogger(__name__)

    args = build_parser().parse_args(argv)
    try:
        client = MoonDream(resolve_config(args))
        logger.info(MSG_CLI_STARTING, args.command, args.image)
        result = asyncio.run(run(args, client))
    except (MoondreamError, OSError) as exc:
        logger.error(MSG_CLI_FAILED, exc)
        return 1

    Console().print_json(result.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
