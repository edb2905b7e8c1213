"""Find and remove static assets that nothing in the source tree references."""

__version__ = "0.1.0"
