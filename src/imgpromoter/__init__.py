"""imgpromoter - derive and validate container image promotion edges."""

__version__ = "0.1.0"
