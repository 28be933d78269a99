"""Byte count formatting."""

from dusk.models import ByteFormat

METRIC_UNITS = ("KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
BINARY_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")

_FIXED_UNITS = {
    ByteFormat.GB: (1000**3, "GB"),
    ByteFormat.GIB: (1024**3, "GiB"),
    ByteFormat.MB: (1000**2, "MB"),
    ByteFormat.MIB: (1024**2, "MiB"),
}

_WIDTHS = {
    ByteFormat.METRIC: 10,
    ByteFormat.BINARY: 11,
    ByteFormat.BYTES: 12,
    ByteFormat.MB: 12,
    ByteFormat.MIB: 12,
    ByteFormat.GB: 10,
    ByteFormat.GIB: 10,
}


def _adaptive(num_bytes: int, base: int, units: tuple[str, ...]) -> str:
    if num_bytes < base:
        return f"{num_bytes} B"
    value = num_bytes / base
    for unit in units[:-1]:
        if value < base:
            return f"{value:.2f} {unit}"
        value /= base
    return f"{value:.2f} {units[-1]}"


def display(fmt: ByteFormat, num_bytes: int) -> str:
    """Render a byte count according to the given format."""
    if fmt == ByteFormat.BYTES:
        return f"{num_bytes} b"
    if fmt == ByteFormat.METRIC:
        return _adaptive(num_bytes, 1000, METRIC_UNITS)
    if fmt == ByteFormat.BINARY:
        return _adaptive(num_bytes, 1024, BINARY_UNITS)
    divisor, suffix = _FIXED_UNITS[fmt]
    return f"{num_bytes / divisor:.2f} {suffix}"


def width(fmt: ByteFormat) -> int:
    """Column width used to right-align sizes in this format."""
    return _WIDTHS[fmt]
