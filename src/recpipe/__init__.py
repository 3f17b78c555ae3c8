"""recpipe: transcode and transfer recordings with best-effort progress."""

__version__ = "0.1.0"
