import argparse
import os
import sys

from . import __version__
from .commands import (
    create_image,
    delete_image,
    list_images,
    resize_image,
    sync_image,
)
from .config import PLATFORM_ONPREM, PLATFORMS
from .core import configure_logging
from .core.exceptions import BaseError, InternalError, LoadError


def _add_common_arguments(
    parser: argparse.ArgumentParser,
    zone_from_env: bool = True,
) -> None:
    parser.add_argument(
        "-c", "--config", type=str, default=None, help="Config file (JSON or YAML)"
    )
    parser.add_argument(
        "-t",
        "--target-cloud",
        dest="target_cloud",
        type=str,
        default=None,
        help=f"Cloud platform [{', '.join(PLATFORMS)}], defaults to the "
        f"config's platform or {PLATFORM_ONPREM}",
    )
    zone_default = None
    zone_help = "Zone of the target cloud platform"
    if zone_from_env:
        zone_default = os.environ.get("GOOGLE_CLOUD_ZONE")
        zone_help = f"{zone_help}, defaults to env GOOGLE_CLOUD_ZONE"
    parser.add_argument(
        "-z", "--zone", type=str, default=zone_default, help=zone_help
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log debug messages"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uniforge", description="Build and manage unikernel images"
    )
    parser.add_argument(
        "--version", action="version", version=f"uniforge {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    image_parser = subparsers.add_parser("image", help="Manage images")
    image_subparsers = image_parser.add_subparsers(
        dest="image_command", required=True
    )

    create_parser = image_subparsers.add_parser(
        "create", help="Create an image on a platform"
    )
    # create keeps the configured zone unless -z is given
    _add_common_arguments(create_parser, zone_from_env=False)
    create_parser.add_argument(
        "-p", "--package", type=str, default=None, help="Package name"
    )
    create_parser.add_argument(
        "-a",
        "--args",
        action="append",
        default=None,
        help="Program and its arguments, repeatable",
    )
    create_parser.add_argument(
        "--mounts",
        action="append",
        default=None,
        help="Volume mount <volume>:<path>, repeatable",
    )
    create_parser.add_argument(
        "-n", "--nightly", action="store_true", help="Use nightly build"
    )
    create_parser.add_argument(
        "-i", "--imagename", type=str, default=None, help="Image name"
    )

    list_parser = image_subparsers.add_parser(
        "list", help="List images on a platform"
    )
    _add_common_arguments(list_parser)

    delete_parser = image_subparsers.add_parser(
        "delete", help="Delete an image from a platform"
    )
    _add_common_arguments(delete_parser)
    delete_parser.add_argument("name", type=str, help="Image name")

    resize_parser = image_subparsers.add_parser(
        "resize", help="Resize an image"
    )
    _add_common_arguments(resize_parser)
    resize_parser.add_argument("name", type=str, help="Image name")
    resize_parser.add_argument("size", type=str, help="New size, e.g. 2G")

    sync_parser = image_subparsers.add_parser(
        "sync", help="Sync an image from one platform to another"
    )
    _add_common_arguments(sync_parser)
    sync_parser.add_argument("name", type=str, help="Image name")
    sync_parser.add_argument(
        "-s",
        "--source-cloud",
        dest="source_cloud",
        type=str,
        default=PLATFORM_ONPREM,
        help="Source platform",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    common = dict(
        config_path=args.config,
        platform=args.target_cloud,
        zone=args.zone,
    )
    if args.image_command == "create":
        create_image(
            package=args.package,
            args=args.args,
            mounts=args.mounts,
            nightly=args.nightly,
            image_name=args.imagename,
            **common,
        )
    elif args.image_command == "list":
        list_images(**common)
    elif args.image_command == "delete":
        delete_image(args.name, **common)
    elif args.image_command == "resize":
        resize_image(args.name, args.size, **common)
    elif args.image_command == "sync":
        sync_image(args.name, source=args.source_cloud, **common)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    try:
        run(args)
    except (BaseError, InternalError, LoadError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
