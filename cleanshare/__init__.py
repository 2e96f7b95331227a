"""cleanshare: strip tracking parameters and unwrap redirect links."""

__version__ = "0.1.0"
