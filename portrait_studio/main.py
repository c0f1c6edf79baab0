# portrait_studio/main.py
import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog
from redis.asyncio import Redis

from portrait_studio import utils
from portrait_studio.data.aspects import ASPECTS
from portrait_studio.data.presets import get_presets
from portrait_studio.data.settings import settings
from portrait_studio.services.clients import get_ai_client
from portrait_studio.services.cooldown import CooldownController
from portrait_studio.services.exceptions import StudioError
from portrait_studio.services.photo_intake import accept_images
from portrait_studio.services.request_history import RequestHistory, create_history_storage
from portrait_studio.services.studio_session import StudioSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portrait-studio",
        description="Compose uploaded people into styled photographic scenes.",
    )
    parser.add_argument("-c", "--character", action="append", default=[], type=Path,
                        help="Character image (repeatable).")
    for aspect in ASPECTS:
        name = aspect.key.value
        parser.add_argument(f"--{name}", metavar="PRESET", help=f"{name.capitalize()} preset id.")
        parser.add_argument(f"--{name}-request", metavar="TEXT", default="",
                            help=f"Free-text refinement for the {aspect.name}.")
        if aspect.allows_custom_upload:
            parser.add_argument(f"--{name}-image", action="append", default=[], type=Path,
                                help=f"Custom {aspect.name} reference image (repeatable).")
    parser.add_argument("-r", "--request", default="", help="Overall additional request.")
    parser.add_argument("--suggest", action="store_true",
                        help="Pre-fill the additional request from the selected options.")
    parser.add_argument("--skin-tone", action="store_true", help="Even out skin tone.")
    parser.add_argument("--makeup", action="store_true", help="Apply light makeup.")
    parser.add_argument("--remove-background", action="store_true",
                        help="Remove the background of every generated image.")
    parser.add_argument("-o", "--out", type=Path, default=Path("output"), help="Output directory.")
    parser.add_argument("--client", default=None, help="Generation client: google or mock.")
    parser.add_argument("--locale", default=None, help="Locale for messages (en, vi).")
    parser.add_argument("--list-presets", action="store_true", help="Print the preset catalog and exit.")
    parser.add_argument("--history", action="store_true", help="Print the request history and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def print_presets() -> None:
    for aspect in ASPECTS:
        print(f"[{aspect.key.value}]")
        for preset in get_presets(aspect.key):
            print(f"  {preset.id:<22} {preset.label}")


def configure_session(session: StudioSession, args: argparse.Namespace) -> None:
    session.add_character_images(args.character)
    for aspect in ASPECTS:
        name = aspect.key.value
        option = session.options.aspect(aspect.key)
        preset_id = getattr(args, name)
        request = getattr(args, f"{name}_request")
        images = getattr(args, f"{name}_image", [])
        if not (preset_id or request or images):
            continue
        option.set_enabled(True)
        if preset_id:
            option.select_preset(preset_id)
        if images:
            option.add_custom_files(accept_images(images))
        option.set_custom_request(request)

    session.options.adjust_skin_tone = args.skin_tone
    session.options.apply_makeup = args.makeup
    session.options.additional_request = args.request
    if args.suggest and not args.request:
        session.suggest_additional_request()


async def run(args: argparse.Namespace, log: structlog.typing.FilteringBoundLogger) -> int:
    redis: Redis | None = None
    if settings.history.backend == "redis":
        redis = await utils.connect_to_services.wait_redis_pool(settings.redis)

    try:
        history = RequestHistory(create_history_storage(redis=redis))
        await history.load()
        if args.history:
            for entry in history.entries:
                print(entry)
            return 0

        session = StudioSession(
            ai_client=get_ai_client(args.client),
            history=history,
            cooldown=CooldownController(),
            locale=args.locale,
        )
        try:
            configure_session(session, args)

            def on_progress(completed: int, total: int) -> None:
                print(session.progress, file=sys.stderr)

            result = await session.submit(progress_callback=on_progress)

            for index in range(len(result)):
                if args.remove_background:
                    await session.remove_background(index)
                path = await session.download(index, args.out)
                print(path)
        except StudioError as e:
            message = session.last_error or str(e)
            log.error("Generation failed", error=message)
            print(message, file=sys.stderr)
            return 1
        finally:
            await session.close()
    finally:
        if redis is not None:
            await redis.aclose()
    return 0


def main() -> None:
    args = build_parser().parse_args()
    if args.list_presets:
        print_presets()
        return

    log = utils.logging.setup_logger(logging.DEBUG if args.verbose else None).bind(type="cli")
    sys.exit(asyncio.run(run(args, log)))


if __name__ == "__main__":
    main()
