"""SpinWheel version information."""

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.1.0 - Wheel renderer on a QPainter canvas, click-to-spin widget
# 0.2.0 - Spin timer released at budget exhaustion instead of idling forever,
#         preemption releases the previous timer before starting a new one
# 0.3.0 - Pillow canvas, PNG render and GIF export commands, config.json settings
