"""Claim verification agent: plan searches, gather evidence, render a verdict."""

__version__ = "0.1.0"
