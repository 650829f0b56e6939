"""ADRULE — automation rule compiler for Shopee ads."""

__version__ = "1.0.0"
