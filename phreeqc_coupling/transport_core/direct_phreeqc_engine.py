"""
Direct PHREEQC Engine - Calls the PHREEQC executable via subprocess

One engine instance is owned by one coupler. The instance fixes the
executable, the thermodynamic database and the files PHREEQC is expected to
write, so independent couplers (e.g. one per mesh partition) never share
state.
"""

import subprocess
import os
from pathlib import Path
from typing import List, Optional
import logging

from ..core_config import CONFIG
from ..exceptions import (
    CouplingIOError,
    DatabaseNotFoundError,
    PHREEQCExecutionError,
    PHREEQCNotFoundError,
    PHREEQCTimeoutError,
)

logger = logging.getLogger(__name__)


class DirectPhreeqcEngine:
    """
    Direct interface to the PHREEQC executable

    The thermodynamic database is resolved once on construction. Result and
    dump files are registered with ``set_selected_output_file_on`` and
    ``set_dump_file_on``; every run removes stale copies first and checks the
    engine produced them again.
    """

    def __init__(self,
                 database: Optional[str] = None,
                 phreeqc_path: Optional[str] = None,
                 working_directory: Optional[str] = None,
                 timeout_s: Optional[float] = None,
                 listing_file: Optional[str] = None):
        """
        Initialize direct PHREEQC interface

        Args:
            database: Database file path or name (e.g. 'phreeqc.dat'); bare
                names are searched like CoreConfig.get_phreeqc_database
            phreeqc_path: Path to PHREEQC executable. If None, searches common locations
            working_directory: Directory PHREEQC runs in (default: current directory)
            timeout_s: Seconds before a run is aborted; None blocks until completion
            listing_file: Path of the PHREEQC listing (default: input file root + .pqo)

        Raises:
            PHREEQCNotFoundError: No executable found
            DatabaseNotFoundError: Database file does not exist
        """
        self.phreeqc_exe = self._find_phreeqc_executable(phreeqc_path)
        logger.info(f"Using PHREEQC executable: {self.phreeqc_exe}")

        self.database = self._load_database(database)
        logger.info(f"Using PHREEQC database: {self.database}")

        self.working_directory = working_directory or os.getcwd()
        self.timeout_s = timeout_s if timeout_s is not None else CONFIG.get_run_timeout_s()
        self.listing_file = str(listing_file) if listing_file else None

        self.selected_output_file: Optional[str] = None
        self.dump_file: Optional[str] = None
        self._error_string = ""

    def _find_phreeqc_executable(self, custom_path: Optional[str] = None) -> str:
        """Find PHREEQC executable from explicit path, environment or common locations"""
        if custom_path:
            if os.path.exists(custom_path):
                return custom_path
            raise PHREEQCNotFoundError(path=custom_path)

        found = CONFIG.get_phreeqc_exe()
        if found is None:
            logger.error(
                f"PHREEQC executable not found for {os.name} platform. "
                f"Please set PHREEQC_EXE environment variable to a valid executable path."
            )
            raise PHREEQCNotFoundError()
        return str(found)

    def _load_database(self, database: Optional[str]) -> str:
        if database and os.path.exists(database):
            return str(Path(database).resolve())

        # Bare names like 'phreeqc.dat' go through the configured search order
        if database is None or os.path.basename(database) == database:
            found = CONFIG.get_phreeqc_database(database)
            if found is not None:
                return str(found)

        raise DatabaseNotFoundError(database=database)

    def set_selected_output_file_on(self, path: str) -> None:
        """Require every run to write the selected-output table to ``path``."""
        self.selected_output_file = str(path)
        logger.debug(f"Selected output file: {self.selected_output_file}")

    def set_dump_file_on(self, path: str) -> None:
        """Require every run to write the dump file to ``path``."""
        self.dump_file = str(path)
        logger.debug(f"Dump file: {self.dump_file}")

    def get_error_string(self) -> str:
        """Diagnostic text of the last failed run."""
        return self._error_string

    def _expected_files(self) -> List[str]:
        return [f for f in (self.selected_output_file, self.dump_file) if f]

    def _listing_file(self, input_file: str) -> str:
        if self.listing_file:
            return self.listing_file
        root, _ = os.path.splitext(input_file)
        return root + ".pqo"

    def _build_command(self, input_file: str, listing_file: str):
        if os.name == 'nt' and self.phreeqc_exe.lower().endswith('.bat'):
            # Windows .bat file - use shell=True with proper quoting
            cmd = f'"{self.phreeqc_exe}" "{input_file}" "{listing_file}" "{self.database}"'
            return cmd, True
        return [self.phreeqc_exe, input_file, listing_file, self.database], False

    def _collect_diagnostics(self, result: subprocess.CompletedProcess, listing_file: str) -> str:
        lines = []
        for stream in (result.stderr, result.stdout):
            if stream:
                lines.extend(line.strip() for line in stream.splitlines()
                             if line.lstrip().startswith("ERROR"))

        if os.path.exists(listing_file):
            with open(listing_file, 'r', encoding='utf-8', errors='ignore') as f:
                lines.extend(line.strip() for line in f if line.lstrip().startswith("ERROR"))

        # Keep order, drop repeats (stderr and listing echo the same messages)
        seen = set()
        unique = []
        for line in lines:
            if line not in seen:
                seen.add(line)
                unique.append(line)
        return "\n".join(unique)

    def run_file(self, input_file: str) -> None:
        """
        Run PHREEQC on an input file and block until it finishes.

        Args:
            input_file: Script written by the coupler

        Raises:
            PHREEQCExecutionError: Non-zero exit status or ERROR diagnostics
            PHREEQCTimeoutError: Run exceeded ``timeout_s``
            CouplingIOError: A registered output file was not written
        """
        input_file = str(input_file)
        if not os.path.exists(input_file):
            raise CouplingIOError(message="PHREEQC input file does not exist", path=input_file)

        # Remove stale outputs so a silent failure cannot be read as fresh results
        for path in self._expected_files():
            if os.path.exists(path):
                os.remove(path)

        listing_file = self._listing_file(input_file)
        cmd, shell = self._build_command(input_file, listing_file)
        logger.debug(f"Command: {cmd if isinstance(cmd, str) else ' '.join(cmd)}")

        self._error_string = ""
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                shell=shell,
                cwd=self.working_directory,
                timeout=self.timeout_s,
                encoding='latin-1' if os.name == 'nt' else 'utf-8',
                errors='replace'
            )
        except subprocess.TimeoutExpired:
            logger.error(f"PHREEQC subprocess timed out after {self.timeout_s} seconds")
            raise PHREEQCTimeoutError(self.timeout_s)
        except OSError as e:
            raise PHREEQCNotFoundError(
                path=self.phreeqc_exe,
                hint=f"Executable could not be started: {e}"
            ) from e

        logger.debug(f"Return code: {result.returncode}")

        diagnostics = self._collect_diagnostics(result, listing_file)
        if result.returncode != 0 or diagnostics:
            self._error_string = diagnostics or (result.stderr or "").strip()
            logger.error(f"PHREEQC failed with return code {result.returncode}")
            logger.error(f"PHREEQC Error: {self._error_string}")
            raise PHREEQCExecutionError(
                input_file=input_file,
                return_code=result.returncode,
                diagnostics=self._error_string
            )

        for path in self._expected_files():
            if not os.path.exists(path):
                raise CouplingIOError(
                    message="PHREEQC finished without writing an expected output file",
                    path=path
                )
