"""lah: a directory listing rendered as a box-drawn table fitted to the terminal."""

__version__ = "1.0.0"
