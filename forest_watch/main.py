"""
Command-line entry point for Forest Watch.

Runs the API server, or calls the three deforestation operations directly
(or through a running server with --remote) and prints the results.
"""

import sys
import json
import base64
import logging
from logging.handlers import RotatingFileHandler
import asyncio
import argparse
from pathlib import Path
import traceback

from dotenv import load_dotenv

from forest_watch.config.settings import Settings
from forest_watch.models.schemas import AnalysisResult
from forest_watch.utils.error_handler import AppError


def setup_logging(debug_mode=False):
    """Configure application logging with rotating file handler"""
    log_level = logging.DEBUG if debug_mode else logging.INFO
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Console goes to stderr so command output on stdout stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level if debug_mode else logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = RotatingFileHandler(
        log_dir / "forest_watch.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # Reduce logging level for some noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)

    return root_logger


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Forest Watch - AI-assisted deforestation analysis")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--remote",
        action="store_true",
        help="Call a running server through its proxy endpoint instead of Gemini directly"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None, help="Server host address")
    serve.add_argument("--port", type=int, default=None, help="Server port")

    analyze = subparsers.add_parser("analyze", help="Analyze deforestation for a forest")
    analyze.add_argument("forest", help="Forest name, e.g. 'Amazon Rainforest'")

    for name, help_text in (("visual", "Generate before/after visual evidence"),
                            ("research", "Run a deep research investigation")):
        sub = subparsers.add_parser(name, help=help_text)
        source = sub.add_mutually_exclusive_group(required=True)
        source.add_argument("forest", nargs="?", help="Forest name; it is analyzed first")
        source.add_argument("--analysis", type=Path, help="JSON file written by 'analyze'")
        if name == "visual":
            sub.add_argument("--start", type=int, default=None, help="Year for the 'before' image")
            sub.add_argument("--end", type=int, default=None, help="Year for the 'after' image")
            sub.add_argument("--output", type=Path, default=Path("visual_evidence.jpg"),
                             help="Where to write the JPEG")

    return parser.parse_args(argv)


def build_service(settings: Settings, remote: bool):
    """Return the direct service, or the proxy client when --remote is given."""
    if remote:
        from forest_watch.services.proxy_client import ProxyClient
        return ProxyClient(settings.proxy_url)

    from forest_watch.services.deforestation_service import create_deforestation_service
    return create_deforestation_service(settings)


async def load_analysis(service, args) -> AnalysisResult:
    if args.analysis is not None:
        return AnalysisResult.model_validate_json(args.analysis.read_text(encoding="utf-8"))
    return await service.analyze(args.forest)


async def run_command(args, settings: Settings) -> None:
    """Run one operation and write its result to stdout (or a file)."""
    logger = logging.getLogger(__name__)
    service = build_service(settings, args.remote)

    if args.command == "analyze":
        result = await service.analyze(args.forest)
        print(json.dumps(result.to_wire(), indent=2))

    elif args.command == "research":
        result = await load_analysis(service, args)
        print(await service.deep_research(result))

    elif args.command == "visual":
        result = await load_analysis(service, args)
        evidence = await service.generate_visual(result, args.start, args.end)
        _, encoded = evidence.image_url.split(",", 1)
        args.output.write_bytes(base64.b64decode(encoded))
        logger.info(f"Wrote visual evidence to {args.output}")
        print(f"{args.output} ({evidence.severity.value}, ~{evidence.loss_percentage:.1f}% loss)")


def serve(args, settings: Settings) -> None:
    import uvicorn

    # Fail before binding the port if the key is missing
    settings.require_api_key()
    uvicorn.run(
        "app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=settings.reload,
    )


def main(argv=None):
    """Main entry point for the application."""
    load_dotenv()
    args = parse_arguments(argv)
    logger = setup_logging(args.debug)
    settings = Settings()

    try:
        if args.command == "serve":
            serve(args, settings)
        else:
            asyncio.run(run_command(args, settings))
    except AppError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.critical(f"Unhandled exception: {e}")
        logger.critical(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
