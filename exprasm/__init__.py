"""Compile arithmetic expressions to x86-64 assembly and check the compiled programs."""

__version__ = "0.1.0"
__all__ = ["compiler", "controller"]