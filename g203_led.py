#!/usr/bin/env python3
# /// script
# dependencies = ["hidapi>=0.14"]
# ///
"""
Logitech G203 LIGHTSYNC Controller - Python CLI

Control the G203 mouse LED via USB HID, without vendor software.

Usage:
    uv run g203_led.py <command>

Commands:
    scan                          List the mouse's HID interfaces
    status                        Connect and report status
    color <#RRGGBB | R G B>       Set a solid color
    effect <fixed|breathe|cycle>  Set an effect (--color, -s MS, -b PCT)
    brightness <0-100>            Set brightness
    raw <hex>                     Send raw 20-byte command (debugging)

Add -n/--dry-run before the command to print the bytes instead of sending.
"""

import sys
from g203.cli import main

if __name__ == "__main__":
    sys.exit(main())
