"""CLI tools for graviton-client."""
