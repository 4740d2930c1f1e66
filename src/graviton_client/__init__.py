"""graviton-client - client shell for the Graviton editor Core."""

# Package version - updated by release automation
__version__ = "0.1.0"
