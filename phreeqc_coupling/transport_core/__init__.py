"""
Transport Core Module

PHREEQC engine drivers used by the coupler
"""

from .direct_phreeqc_engine import DirectPhreeqcEngine

__all__ = ["DirectPhreeqcEngine"]
