"""
Core Configuration Module for the PHREEQC coupling core

Centralizes defaults shared by the script writer, the engine driver and the
factory: file naming, knob defaults, and the PHREEQC executable/database
lookup.
"""

from dataclasses import dataclass
from pathlib import Path
import os
import shutil
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoreConfig:
    """
    Centralized configuration for the coupling core.

    Using frozen=True ensures these values cannot be modified at runtime.
    """

    # File naming, relative to the project file name
    INPUT_FILE_SUFFIX: str = "_phreeqc.inp"
    SELECTED_OUTPUT_FILE_SUFFIX: str = "_phreeqc.sel"
    DUMP_FILE_SUFFIX: str = "_phreeqc.dmp"
    LISTING_FILE_SUFFIX: str = "_phreeqc.pqo"

    # Transport process variable carrying the hydrogen ion concentration
    HYDROGEN_COMPONENT: str = "H"

    # KNOBS defaults (PHREEQC defaults)
    DEFAULT_MAX_ITER: int = 100
    DEFAULT_RELATIVE_CONVERGENCE_TOLERANCE: float = 1e-12
    DEFAULT_TOLERANCE: float = 1e-15
    DEFAULT_STEP_SIZE: float = 100.0
    DEFAULT_SCALING: bool = False

    # Aqueous solution defaults
    DEFAULT_TEMPERATURE_C: float = 25.0
    DEFAULT_PRESSURE_ATM: float = 1.0
    DEFAULT_PH: float = 7.0
    DEFAULT_PE: float = 4.0

    # PHREEQC database selection
    PHREEQC_DATABASE_NAME: str = "phreeqc.dat"

    def get_phreeqc_exe(self) -> Optional[Path]:
        """Get PHREEQC executable path from environment, common locations or PATH."""
        env_path = os.getenv('PHREEQC_EXE')
        if env_path and os.path.exists(env_path):
            return Path(env_path)

        common_paths = [
            r"C:\Program Files\USGS\phreeqc-3.8.6-17100-x64\bin\phreeqc.bat",
            r"C:\Program Files\USGS\phreeqc\bin\phreeqc.bat",
            r"C:\phreeqc\bin\phreeqc.bat",
            os.path.join(os.path.expanduser("~"), "phreeqc", "bin", "phreeqc"),
            "/usr/local/bin/phreeqc",
            "/usr/bin/phreeqc",
        ]

        for path in common_paths:
            if os.path.exists(path):
                return Path(path)

        which = shutil.which("phreeqc")
        if which:
            return Path(which)

        return None

    def get_phreeqc_database(self, db_name: Optional[str] = None) -> Optional[Path]:
        """Get PHREEQC database path from environment or use default.

        Args:
            db_name: Database filename (e.g., 'phreeqc.dat', 'pitzer.dat').
                     If None, uses PHREEQC_DATABASE_NAME from config.

        Returns:
            Path to the database file, or None if it cannot be found

        Search order:
            1. PHREEQC_DATABASE environment variable
            2. System PHREEQC installations
            3. Databases bundled with phreeqpython
        """
        if db_name is None:
            db_name = self.PHREEQC_DATABASE_NAME

        env_path = os.getenv('PHREEQC_DATABASE')
        if env_path and os.path.exists(env_path):
            logger.debug(f"Using PHREEQC database from PHREEQC_DATABASE env: {env_path}")
            return Path(env_path)

        common_dirs = [
            r"C:\Program Files\USGS\phreeqc-3.8.6-17100-x64\database",
            r"C:\Program Files\USGS\phreeqc\database",
            r"C:\phreeqc\database",
            os.path.join(os.path.expanduser("~"), "phreeqc", "database"),
            "/usr/local/share/phreeqc/database",
            "/usr/share/phreeqc/database",
        ]

        for dir_path in common_dirs:
            full_path = Path(dir_path) / db_name
            if full_path.exists():
                logger.debug(f"Using PHREEQC database from system path: {full_path}")
                return full_path

        # phreeqpython ships the standard USGS databases; importing it is slow
        try:
            import phreeqpython
            phreeqpy_db = Path(phreeqpython.__file__).parent / "database" / db_name
            if phreeqpy_db.exists():
                logger.debug(f"Using PHREEQC database from phreeqpython: {phreeqpy_db}")
                return phreeqpy_db
        except ImportError:
            logger.warning("phreeqpython not available and database not found in system paths")

        logger.warning(f"Database {db_name} not found in any location")
        return None

    def get_run_timeout_s(self) -> Optional[float]:
        """Timeout for a single PHREEQC run, or None to block until completion."""
        value = os.getenv('PHREEQC_RUN_TIMEOUT_S')
        if not value:
            return None
        return float(value)


# Create singleton instance
CONFIG = CoreConfig()
