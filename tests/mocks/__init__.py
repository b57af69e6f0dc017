"""
Mock modules for unit testing.

This package provides mock implementations of the PHREEQC engine driver
to enable fast, isolated unit tests without a PHREEQC installation.
"""

from .mock_phreeqc import MockPhreeqcEngine, MockPhreeqcEngineFailure

__all__ = ["MockPhreeqcEngine", "MockPhreeqcEngineFailure"]
