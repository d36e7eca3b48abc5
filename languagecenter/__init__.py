"""Language Center client: remote-synchronised translations with local fallback."""

__version__ = "1.0.0"
