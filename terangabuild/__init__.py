"""TerangaBuild - construction project tracking core."""

__version__ = "0.1.0"
