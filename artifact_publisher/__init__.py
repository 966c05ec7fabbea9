"""Assemble, sign and publish a JVM library to a Maven repository."""

__version__ = "0.1.0"
