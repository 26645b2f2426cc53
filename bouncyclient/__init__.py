"""Text-mode client for a Bouncy World simulation server: protocol, decoding and drawing."""

__version__ = "2.0.1"
__all__ = ["__version__"]