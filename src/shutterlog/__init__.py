"""shutterlog — static site generator for a blog and photo portfolio."""

__version__ = "0.1.0"
