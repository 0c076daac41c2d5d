"""
Exceptions raised and recognized by graphrepr formatters.
"""


class UnsupportedPlatformError(NotImplementedError):
    """
    The value cannot be read on the running platform.

    Member getters may raise it to signal an unavailable platform feature;
    the typed formatter renders it as ``!<unsupported platform>``.
    """


class UnsupportedShapeError(NotImplementedError):
    """
    The value has no safe textual form.

    Raised for shapes such as multi-level ctypes pointer indirection, which
    cannot be dereferenced safely and would otherwise degrade silently.
    """
