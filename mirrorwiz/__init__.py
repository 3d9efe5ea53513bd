"""Mirror Wizard — package-manager mirror registry and static site generator."""

__version__ = "0.1.0"
