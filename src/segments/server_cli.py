"""``segments-server``: run the segments API under uvicorn."""

import argparse
import os


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="segments-server",
        description="Serve the segment hierarchy and activity configuration API.",
    )
    parser.add_argument("--host", help="interface to bind (default: SEGMENTS_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="port to bind (default: SEGMENTS_PORT or 8080)")
    parser.add_argument("--log-level", help="debug, info, warning or error (default: SEGMENTS_LOG_LEVEL)")
    parser.add_argument(
        "--local",
        action="store_true",
        help="store segments in ./segments_local.db and create tables on startup",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _parser().parse_args(argv)

    # Settings are read on first import, so the environment is set up first
    if args.local:
        os.environ["SEGMENTS_LOCAL_MODE"] = "1"
    if args.log_level:
        os.environ["SEGMENTS_LOG_LEVEL"] = args.log_level

    import uvicorn

    from segments.config import Settings

    settings = Settings()
    uvicorn.run(
        "segments.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
