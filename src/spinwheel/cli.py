#!/usr/bin/env python3
"""
SpinWheel - Command Line Interface

Entry point for the spinwheel package.
"""

import argparse
import logging
import math
import os
import sys

from spinwheel.__version__ import __version__


def _setup_logging(verbose=0):
    """Configure logging from the -v count (filter out noisy PIL)."""
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format='[%(levelname)s] %(name)s: %(message)s')
        logging.getLogger('PIL').setLevel(logging.WARNING)
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="spinwheel",
        description="Segmented color wheel with a timer-driven spin",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    spinwheel gui                         Open the wheel window
    spinwheel render wheel.png            Save the idle frame
    spinwheel render wheel.png -r 0       Save the frame at rotation 0
    spinwheel export spin.gif --ticks 300 Save a spin as an animated GIF
    spinwheel config                      Show effective settings
    spinwheel config speed_factor 2.5     Change a setting
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # GUI command
    subparsers.add_parser("gui", help="Open the wheel window")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render one frame to an image file")
    render_parser.add_argument("output", help="Output image (PNG recommended)")
    render_parser.add_argument("--rotation", "-r", type=float, default=math.pi,
                               help="Rotation in radians (default: pi)")
    render_parser.add_argument("--size", "-s", type=int, help="Canvas size in pixels")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export a spin as an animated GIF")
    export_parser.add_argument("output", help="Output GIF file")
    export_parser.add_argument("--ticks", "-t", type=int, help="Tick budget of the spin")
    export_parser.add_argument("--speed", type=float, help="Speed factor")
    export_parser.add_argument("--step", type=int, default=1, help="Keep every Nth tick")
    export_parser.add_argument("--frame-ms", type=int, default=20, help="Milliseconds per frame")
    export_parser.add_argument("--size", "-s", type=int, help="Canvas size in pixels")

    # Config command
    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_parser.add_argument("key", nargs="?", help="Setting name")
    config_parser.add_argument("value", nargs="?", help="New value")

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "gui":
        return gui()
    elif args.command == "render":
        return render(args.output, rotation=args.rotation, size=args.size)
    elif args.command == "export":
        return export(args.output, ticks=args.ticks, speed=args.speed,
                      step=args.step, frame_ms=args.frame_ms, size=args.size)
    elif args.command == "config":
        return config(key=args.key, value=args.value)

    return 0


def gui():
    """Launch the GUI application."""
    try:
        from spinwheel.qt_components.uc_spin_wheel import run_app
        return run_app()
    except ImportError as e:
        print(f"Error: PySide6 not available: {e}")
        print("Install with: pip install PySide6")
        return 1
    except Exception as e:
        print(f"Error launching GUI: {e}")
        import traceback
        traceback.print_exc()
        return 1


def render(output, rotation=math.pi, size=None):
    """Render a single wheel frame to an image file."""
    try:
        from spinwheel.conf import settings
        from spinwheel.frames import render_frame

        wheel = settings.wheel(size=size)
        image = render_frame(wheel, rotation)
        image.save(output)
        print(f"Saved {output} ({image.width}x{image.height}, rotation {rotation:.4f})")
        return 0
    except Exception as e:
        print(f"Error rendering frame: {e}")
        return 1


def export(output, ticks=None, speed=None, step=1, frame_ms=20, size=None):
    """Export a spin as an animated GIF."""
    try:
        from spinwheel.conf import settings
        from spinwheel.frames import export_spin_gif

        wheel = settings.wheel(size=size)
        count = export_spin_gif(
            output, wheel,
            tick_budget=settings.tick_budget if ticks is None else ticks,
            speed_factor=settings.speed_factor if speed is None else speed,
            step=step,
            frame_ms=frame_ms,
        )
        print(f"Exported {count} frames to {output}")
        return 0
    except Exception as e:
        print(f"Error exporting spin: {e}")
        return 1


def config(key=None, value=None):
    """Show settings, or persist one setting."""
    from spinwheel.conf import CONFIG_PATH, settings

    if key is None:
        print(f"Config: {CONFIG_PATH}" + ("" if os.path.exists(CONFIG_PATH) else " (not created)"))
        for name, current in settings.as_dict().items():
            print(f"  {name}: {current}")
        return 0

    if value is None:
        try:
            print(settings.get(key))
            return 0
        except KeyError:
            print(f"Error: unknown setting {key!r}")
            return 1

    try:
        parsed = settings.set_value(key, value)
        print(f"{key} = {parsed}")
        return 0
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
