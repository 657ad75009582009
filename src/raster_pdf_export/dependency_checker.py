"""
Dependency checker and process-wide library loader

The imaging and PDF writing libraries are verified once per process. The
first caller performs the check; concurrent callers wait for that same check
instead of repeating it.
"""

import importlib
import importlib.metadata
import logging
import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from .error_handling import DependenciesUnavailableError

logger = logging.getLogger(__name__)


class DependencyStatus(Enum):
    """Status of a dependency"""
    AVAILABLE = "available"
    MISSING = "missing"
    VERSION_MISMATCH = "version_mismatch"


@dataclass
class DependencyInfo:
    """Information about a dependency"""
    name: str
    module_name: str
    distribution: Optional[str] = None
    required: bool = False
    min_version: Optional[str] = None
    description: str = ""
    impact_if_missing: str = ""


DEFAULT_DEPENDENCIES = {
    "pillow": DependencyInfo(
        name="Pillow",
        module_name="PIL.Image",
        distribution="pillow",
        required=True,
        min_version="10.0.0",
        description="Bitmap decoding, rotation and JPEG encoding",
        impact_if_missing="Cannot rasterize, rotate or encode page images"
    ),
    "reportlab": DependencyInfo(
        name="ReportLab",
        module_name="reportlab.pdfgen.canvas",
        distribution="reportlab",
        required=True,
        min_version="4.0.0",
        description="PDF document writing",
        impact_if_missing="Cannot write PDF documents"
    ),
    "pymupdf": DependencyInfo(
        name="PyMuPDF",
        module_name="fitz",
        distribution="PyMuPDF",
        required=False,
        description="Rendering pages of existing PDFs",
        impact_if_missing="PDF pages cannot be used as export sources"
    ),
    "pyqt6": DependencyInfo(
        name="PyQt6",
        module_name="PyQt6.QtWidgets",
        distribution="PyQt6",
        required=False,
        description="Capturing Qt widgets",
        impact_if_missing="Widgets cannot be used as export sources"
    ),
    "psutil": DependencyInfo(
        name="psutil",
        module_name="psutil",
        distribution="psutil",
        required=False,
        min_version="5.9.0",
        description="Memory checks before large bitmap allocations",
        impact_if_missing="No low-memory warnings"
    ),
}


class DependencyChecker:
    """Check which optional and required libraries can be imported"""

    def __init__(self, dependencies: Optional[Dict[str, DependencyInfo]] = None,
                 log_callback: Optional[Callable[[str], None]] = None):
        self.log_callback = log_callback
        self.dependencies = dependencies if dependencies is not None else dict(DEFAULT_DEPENDENCIES)
        self._dependency_status: Dict[str, DependencyStatus] = {}

    def log(self, message, level=logging.INFO):
        logger.log(level, message)
        if self.log_callback:
            self.log_callback(message)

    def check_dependencies(self) -> Dict[str, DependencyStatus]:
        """Check all dependencies and return their status"""
        for dep_name, dep_info in self.dependencies.items():
            status = self._check_single_dependency(dep_info)
            self._dependency_status[dep_name] = status

            if status == DependencyStatus.AVAILABLE:
                self.log(f"{dep_info.name}: Available", logging.DEBUG)
            elif status == DependencyStatus.MISSING:
                kind = "Required" if dep_info.required else "Optional"
                level = logging.ERROR if dep_info.required else logging.WARNING
                self.log(f"{dep_info.name}: Missing ({kind}) - {dep_info.impact_if_missing}", level)
            elif status == DependencyStatus.VERSION_MISMATCH:
                self.log(f"{dep_info.name}: older than {dep_info.min_version}", logging.WARNING)

        return dict(self._dependency_status)

    def _check_single_dependency(self, dep_info: DependencyInfo) -> DependencyStatus:
        try:
            importlib.import_module(dep_info.module_name)
        except ImportError:
            return DependencyStatus.MISSING

        if dep_info.min_version:
            version = self._get_installed_version(dep_info)
            if version and self._compare_versions(version, dep_info.min_version) < 0:
                return DependencyStatus.VERSION_MISMATCH
        return DependencyStatus.AVAILABLE

    def _get_installed_version(self, dep_info: DependencyInfo) -> Optional[str]:
        """Installed distribution version, falling back to the top-level package attributes"""
        if dep_info.distribution:
            try:
                return importlib.metadata.version(dep_info.distribution)
            except importlib.metadata.PackageNotFoundError:
                pass

        # Submodule __version__ strings can be stale per-file values
        package = importlib.import_module(dep_info.module_name.split(".")[0])
        for attr in ("__version__", "VERSION", "Version"):
            version = getattr(package, attr, None)
            if isinstance(version, str):
                return version
        return None

    def _compare_versions(self, version1: str, version2: str) -> int:
        """Compare two version strings
        Returns: -1 if version1 < version2, 0 if equal, 1 if version1 > version2
        """
        def normalize_version(v):
            parts = []
            for piece in v.split("."):
                match = re.match(r"\d+", piece)
                if not match:
                    break
                parts.append(int(match.group()))
            return parts

        v1_parts = normalize_version(version1)
        v2_parts = normalize_version(version2)

        # Pad shorter version with zeros
        max_len = max(len(v1_parts), len(v2_parts))
        v1_parts.extend([0] * (max_len - len(v1_parts)))
        v2_parts.extend([0] * (max_len - len(v2_parts)))

        for v1, v2 in zip(v1_parts, v2_parts):
            if v1 < v2:
                return -1
            elif v1 > v2:
                return 1
        return 0

    def get_missing_required_dependencies(self) -> List[str]:
        """Names of required dependencies that are not usable"""
        missing = []
        for dep_name, dep_info in self.dependencies.items():
            status = self._dependency_status.get(dep_name)
            if dep_info.required and status != DependencyStatus.AVAILABLE:
                missing.append(dep_info.name)
        return missing

    def is_available(self, dep_name: str) -> bool:
        return self._dependency_status.get(dep_name) == DependencyStatus.AVAILABLE


class _LoadAttempt:
    """Outcome of one library check, shared by the caller running it and its waiters"""

    def __init__(self):
        self.done = threading.Event()
        self.checker: Optional[DependencyChecker] = None
        self.error: Optional[DependenciesUnavailableError] = None

    @property
    def succeeded(self) -> bool:
        return self.done.is_set() and self.error is None


class LibraryLoader:
    """One-shot, thread-safe readiness check shared by every export"""

    def __init__(self, checker_factory: Callable[[], DependencyChecker] = DependencyChecker):
        self._checker_factory = checker_factory
        self._lock = threading.Lock()
        self._attempt: Optional[_LoadAttempt] = None
        self.load_count = 0

    @property
    def is_ready(self) -> bool:
        attempt = self._attempt
        return attempt is not None and attempt.succeeded

    @property
    def checker(self) -> Optional[DependencyChecker]:
        attempt = self._attempt
        return attempt.checker if attempt is not None and attempt.succeeded else None

    def ensure_ready(self, timeout: Optional[float] = None) -> DependencyChecker:
        """
        Block until the libraries are verified

        Raises:
            DependenciesUnavailableError: if a required library is missing, or
            the in-flight check did not finish within timeout
        """
        with self._lock:
            attempt = self._attempt
            if attempt is not None and attempt.succeeded:
                return attempt.checker
            owner = attempt is None or attempt.done.is_set()
            if owner:
                attempt = _LoadAttempt()
                self._attempt = attempt
                self.load_count += 1

        if owner:
            self._load(attempt)
        elif not attempt.done.wait(timeout):
            raise DependenciesUnavailableError("Timed out waiting for PDF libraries to load")

        if attempt.error is not None:
            raise attempt.error
        return attempt.checker

    def _load(self, attempt: _LoadAttempt):
        checker = None
        error = None
        try:
            checker = self._checker_factory()
            checker.check_dependencies()
            missing = checker.get_missing_required_dependencies()
            if missing:
                error = DependenciesUnavailableError(
                    f"PDF libraries not available: {', '.join(missing)}"
                )
        except Exception as e:
            error = DependenciesUnavailableError(f"Failed to load PDF libraries: {e}")
            error.__cause__ = e
        finally:
            attempt.checker = checker if error is None else None
            attempt.error = error
            attempt.done.set()

    def reset(self):
        """Forget the previous result so the next caller checks again"""
        with self._lock:
            if self._attempt is not None and self._attempt.done.is_set():
                self._attempt = None


_loader = LibraryLoader()


def get_library_loader() -> LibraryLoader:
    return _loader


def ensure_pdf_libs(timeout: Optional[float] = None) -> DependencyChecker:
    """Make sure Pillow and ReportLab are usable, checking at most once per process"""
    return _loader.ensure_ready(timeout)
