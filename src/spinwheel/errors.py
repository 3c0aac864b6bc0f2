"""Error types shared by the renderer, canvases and timer handles."""


class SurfaceError(RuntimeError):
    """A drawing primitive could not be obtained from (or used on) a surface.

    Fatal to the current draw call and to the spin that issued it.
    """


class ResourceError(RuntimeError):
    """A repeating timer could not be registered.

    Raised by interval factories; ``SpinController.start()`` lets it
    propagate and stays idle.
    """
