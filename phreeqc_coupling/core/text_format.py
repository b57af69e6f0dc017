"""
Number and flag formatting shared by the PHREEQC block writers
"""


def format_number(value) -> str:
    """Full-precision text for a float; numpy scalars are unwrapped first."""
    return repr(float(value))


def format_bool(flag: bool) -> str:
    return "true" if flag else "false"
