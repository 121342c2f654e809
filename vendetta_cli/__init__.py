"""Vendetta - vendor Go dependencies as git submodules."""

__version__ = "0.1.0"
