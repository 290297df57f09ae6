import argparse
import logging
import sys

from tokenartisan.app.logging_conf import LOG_PATH, configure_logging
from tokenartisan.app.preferences import LayerPreferences
from tokenartisan.constants import MIN_CANVAS_SIZE
from tokenartisan.errors import TokenArtisanError
from tokenartisan.layers.layer import Layer
from tokenartisan.layers.layer_manager import LayerManager
from tokenartisan.utilities.image.operations import load_image, save_raster


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="token-artisan",
        description="Stack images into a token and write the flattened result.",
    )
    parser.add_argument("output", help="Path of the flattened token image.")
    parser.add_argument("images", nargs="+", help="Layer images, bottom first.")
    parser.add_argument("--size", type=int, default=MIN_CANVAS_SIZE, help="Side of the square token.")
    parser.add_argument("--color", help="Color layer placed below every image.")
    parser.add_argument(
        "--mask-image",
        type=int,
        action="append",
        default=[],
        help="Index of an image whose outline masks the layers below it. Can be repeated.",
    )
    parser.add_argument(
        "--transparent-color",
        action="append",
        default=[],
        help="Color carved out of every image layer. Can be repeated.",
    )
    parser.add_argument("--crop", action="store_true", help="Cover the canvas instead of fitting the image.")
    parser.add_argument("--ray-mask", action="store_true", help="Use ray casting instead of contour tracing.")
    parser.add_argument("--log-file", default=LOG_PATH, help="Where errors are logged.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging on the console.")
    return parser


def compose_token(args) -> LayerManager:
    preferences = LayerPreferences(crop_to_fit=args.crop, use_ray_cast_mask=args.ray_mask)
    layer_manager = LayerManager(args.size, args.size)

    if args.color:
        layer_manager.add_layer(Layer.from_color(args.color, args.size, args.size, preferences=preferences))

    for index, path in enumerate(args.images):
        layer = Layer.from_image(load_image(path), args.size, args.size, preferences=preferences)
        layer.provides_mask = index in args.mask_image
        for color in args.transparent_color:
            layer.add_transparent_colour(color)
        layer_manager.add_layer(layer)

    layer_manager.redraw_all()
    return layer_manager


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, "DEBUG" if args.verbose else "WARNING")
    logger = logging.getLogger()

    try:
        layer_manager = compose_token(args)
        save_raster(layer_manager.flatten(), args.output)
    except (TokenArtisanError, OSError) as e:
        logger.error("Couldn't create the token: %s", e)
        return 1

    logger.debug("Token with %s layers saved to %s", len(layer_manager.get_layers()), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
