"""Wait for a Netlify deploy of a commit to become available."""

__version__ = "0.1.0"
