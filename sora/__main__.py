"""CLI entrypoint: python -m sora {extract|reading-time}."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path

from sora.config import get_log_settings, load_config


def setup_logging(config: dict) -> None:
    """Configure logging with console + optional rotating file output."""
    settings = get_log_settings(config)
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings["level"], logging.INFO))

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console goes to stderr so stdout stays JSON
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    root.addHandler(console)

    if settings["file"]:
        log_file = Path(settings["file"])
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Rotate at 5MB, keep 3 backups
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3,
        )
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger("sora")


async def cmd_extract(config: dict, args: list[str]) -> int:
    """Extract each URL and print one JSON record per line."""
    from sora.errors import ExtractionError
    from sora.pipeline import extract_articles
    from sora.reading import estimate_reading_time

    if not args:
        print("Usage: python -m sora extract URL [URL ...]")
        return 1

    failed = 0
    results = await extract_articles(args, config)
    for url, result in zip(args, results):
        if isinstance(result, ExtractionError):
            failed += 1
            print(json.dumps({"url": url, "error": str(result)}))
            continue
        record = {"url": url, **result.to_dict()}
        record["readingTimeMinutes"] = estimate_reading_time(result.content)
        print(json.dumps(record, ensure_ascii=False))

    if failed:
        logger.error("%d of %d URLs failed", failed, len(args))
    return 1 if failed else 0


def cmd_reading_time(config: dict, args: list[str]) -> int:
    """Print the reading-time estimate for a text file ('-' for stdin)."""
    from sora.reading import estimate_reading_time

    if len(args) != 1:
        print("Usage: python -m sora reading-time FILE")
        return 1

    if args[0] == "-":
        text = sys.stdin.read()
    else:
        text = Path(args[0]).read_text(encoding="utf-8")
    print(f"{estimate_reading_time(text)} min")
    return 0


COMMANDS = {
    "extract": cmd_extract,
    "reading-time": cmd_reading_time,
}


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        available = ", ".join(COMMANDS)
        print(f"Usage: python -m sora {{{available}}} ...")
        sys.exit(1)

    command, args = argv[0], argv[1:]
    config_path = os.environ.get("SORA_CONFIG", "config.yaml")
    config = load_config(config_path) if Path(config_path).exists() else {}
    setup_logging(config)
    handler = COMMANDS[command]

    if inspect.iscoroutinefunction(handler):
        status = asyncio.run(handler(config, args))
    else:
        status = handler(config, args)
    sys.exit(status)


if __name__ == "__main__":
    main()
