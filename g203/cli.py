"""
G203 LED — CLI entry point (argparse).
"""

import argparse
import logging
import sys

from g203.colors import parse_color
from g203.config import Settings, parse_int
from g203.errors import G203Error, ValidationError


def _color_arg(values):
    """['#ff0000'] or ['255', '0', '0'] -> (r, g, b)."""
    if len(values) == 1:
        return parse_color(values[0])
    if len(values) == 3:
        try:
            return tuple(int(v) for v in values)
        except ValueError:
            raise ValidationError(f"Bad color components: {' '.join(values)}") from None
    raise ValidationError("Color is '#RRGGBB' or three numbers R G B")


def _setup_logging(verbose, settings):
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = settings.log_level
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="g203_led",
        description="Logitech G203 LIGHTSYNC — USB HID lighting control",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging (-vv for debug)")
    parser.add_argument("--vid", type=parse_int, help="USB vendor id (default 0x046D)")
    parser.add_argument("--pid", type=parse_int, help="USB product id (default 0xC092)")
    parser.add_argument("--led-path", help="Open this LED interface path directly")
    parser.add_argument("--config-path", help="Open this config interface path directly")
    parser.add_argument("-n", "--dry-run", action="store_true",
                        help="Print the encoded commands instead of sending them")
    sub = parser.add_subparsers(dest="command")

    # scan
    sub.add_parser("scan", help="List the mouse's HID interfaces")

    # status
    sub.add_parser("status", help="Connect and report connection status")

    # color
    p_col = sub.add_parser("color", help="Set a solid color")
    p_col.add_argument("color", nargs="+", help="#RRGGBB or R G B (0-255 each)")
    p_col.add_argument("-b", "--brightness", type=int, help="Brightness (0-100)")

    # effect
    p_eff = sub.add_parser("effect", help="Set a lighting effect")
    p_eff.add_argument("name", choices=["fixed", "breathe", "cycle"])
    p_eff.add_argument("--color", nargs="+", metavar="COLOR",
                       help="#RRGGBB or R G B (fixed/breathe)")
    p_eff.add_argument("-s", "--speed", type=int,
                       help="Effect period in ms (1000-65535)")
    p_eff.add_argument("-b", "--brightness", type=int, help="Brightness (0-100)")

    # brightness
    p_br = sub.add_parser("brightness", help="Set brightness only")
    p_br.add_argument("percent", type=int, help="Brightness (0-100)")

    # raw
    p_raw = sub.add_parser("raw", help="Send a raw 20-byte command (hex)")
    p_raw.add_argument("hex", help="40 hex chars (20 bytes)")

    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env().override(
            vendor_id=args.vid, product_id=args.pid,
            led_path=args.led_path, config_path=args.config_path,
        )
    except ValidationError as e:
        print(f"Bad configuration: {e}", file=sys.stderr)
        return 1
    _setup_logging(args.verbose, settings)

    if not args.command:
        parser.print_help()
        return 1

    from g203.commands import (cmd_scan, cmd_status, cmd_color, cmd_effect,
                               cmd_brightness, cmd_raw)

    try:
        if args.command == "scan":
            return cmd_scan(settings)
        elif args.command == "status":
            return cmd_status(settings)
        elif args.command == "color":
            return cmd_color(settings, _color_arg(args.color),
                             brightness=args.brightness, dry_run=args.dry_run)
        elif args.command == "effect":
            return cmd_effect(
                settings, args.name,
                color_rgb=_color_arg(args.color) if args.color else None,
                speed=args.speed,
                brightness=args.brightness,
                dry_run=args.dry_run,
            )
        elif args.command == "brightness":
            return cmd_brightness(settings, args.percent, dry_run=args.dry_run)
        elif args.command == "raw":
            return cmd_raw(settings, args.hex, dry_run=args.dry_run)
    except G203Error as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0
