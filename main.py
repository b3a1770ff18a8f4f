"""
Audio Cache - command-line entrypoint
Pre-loads assets into the local cache, or plays them from it.
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from audio_cache.errors import AudioCacheError
from audio_cache.services.cache import AudioCache
from audio_cache.services.player import ensure_ffplay
from audio_cache.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="audio-cache", description=__doc__)
    parser.add_argument("--prefix", default=None, help="prefix for bundled asset names")
    parser.add_argument("--quiet-player", action="store_true", help="silence player logs")
    sub = parser.add_subparsers(dest="command", required=True)

    preload = sub.add_parser("preload", help="materialize assets and print their paths")
    preload.add_argument("identifiers", nargs="+")

    for name in ("play", "loop"):
        cmd = sub.add_parser(name, help=f"{name} one asset")
        cmd.add_argument("identifier")
        cmd.add_argument("--volume", type=float, default=1.0)

    return parser


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    logger = logging.getLogger(__name__)

    async with AudioCache(prefix=args.prefix) as cache:
        if args.quiet_player:
            cache.disable_log()
        try:
            if args.command == "preload":
                for path in await cache.load_all(args.identifiers):
                    print(path)
            elif args.command == "play":
                ensure_ffplay()
                player = await cache.play(args.identifier, volume=args.volume)
                await player.wait()
            else:
                # loop() only logs a failed start
                ensure_ffplay()
                await cache.loop(args.identifier, volume=args.volume)
                await asyncio.Event().wait()  # until interrupted
        except AudioCacheError as exc:
            logger.error("Command failed", extra={"command": args.command, "error": str(exc)})
            print(f"error: {exc}", file=sys.stderr)
            return 1
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
