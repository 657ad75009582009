"""
Error handling utilities for Raster PDF Export.
Provides the exception hierarchy, input validation and safe file operations.
"""

import os
import re
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from . import config


class ExportError(Exception):
    """Base class for every failure raised by the export pipeline"""
    pass


class ValidationError(ExportError):
    """Raised when input validation fails"""
    pass


class ResourceError(ExportError):
    """Raised when resource management fails"""
    pass


class ProcessingError(ExportError):
    """Raised when document processing fails"""
    pass


class InvalidBitmapError(ValidationError):
    """Raised for zero-area, malformed or undecodable source bitmaps"""
    pass


class DependenciesUnavailableError(ResourceError):
    """Raised when the imaging or PDF writing libraries cannot be loaded"""
    pass


class PersistenceError(ProcessingError):
    """Raised when the finished document cannot be written"""
    pass


class DocumentClosedError(ProcessingError):
    """Raised when a document is modified or saved after it was saved"""
    pass


class ErrorHandler:
    """Validation and error handling utilities shared by the pipelines"""

    def __init__(self, logger=None, log_callback=None):
        self.logger = logger or logging.getLogger(__name__)
        self.log_callback = log_callback

    def validate_bitmap_dimensions(self, width: Any, height: Any) -> None:
        """Raise InvalidBitmapError unless both dimensions are positive integers"""
        errors = []

        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"Bitmap {name} must be an integer, got {value!r}")
            elif value <= 0:
                errors.append(f"Bitmap {name} must be positive, got {value}")

        if errors:
            raise InvalidBitmapError("; ".join(errors))

    def validate_page_geometry(self, page_width: float, page_height: float,
                               margin: float) -> List[str]:
        """Validate page dimensions and margin and return list of errors"""
        errors = []

        if page_width <= 0 or page_height <= 0:
            errors.append(f"Page dimensions must be positive: {page_width}x{page_height}")
        if margin < 0:
            errors.append(f"Margin cannot be negative: {margin}")
        if page_width - 2 * margin <= 0 or page_height - 2 * margin <= 0:
            errors.append(f"Margin {margin} leaves no usable area on a "
                          f"{page_width}x{page_height} page")

        return errors

    def validate_filename_safety(self, filename: str) -> bool:
        """Validate that filename is safe for filesystem operations"""
        if not filename or len(filename) > 255:
            return False

        # Check for invalid characters
        invalid_chars = r'[<>:"/\\|?*\x00-\x1F]'
        if re.search(invalid_chars, filename):
            return False

        # Check for reserved names
        reserved_names = {'CON', 'PRN', 'AUX', 'NUL'} | {f'COM{i}' for i in range(1, 10)} | {f'LPT{i}' for i in range(1, 10)}
        if Path(filename).stem.upper() in reserved_names:
            return False

        return True

    def validate_output_path(self, output_path: Union[str, Path]) -> Path:
        """Check the target of a save and return it as a Path"""
        path = Path(output_path)

        if not self.validate_filename_safety(path.name):
            raise PersistenceError(f"Unsafe output filename: {path.name!r}")
        if path.exists() and path.is_dir():
            raise PersistenceError(f"Output path is a directory: {path}")

        parent = path.parent if str(path.parent) else Path(".")
        if not parent.exists():
            raise PersistenceError(f"Output folder does not exist: {parent}")
        if not os.access(parent, os.W_OK):
            raise PersistenceError(f"Cannot write to output folder: {parent}")

        return path

    def check_system_resources(self, width: int, height: int) -> Optional[str]:
        """Warn when a bitmap allocation would push memory usage too high.

        Returns the warning message, or None when resources look sufficient.
        Resource checks never fail an export.
        """
        try:
            import psutil
        except ImportError:
            return None

        required_mb = width * height * config.BYTES_PER_PIXEL / (1024 * 1024)
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024 * 1024)

        warning = None
        if available_mb < required_mb * 3:
            warning = (f"Low memory: {available_mb:.0f}MB available, "
                       f"{required_mb * 3:.0f}MB recommended for a {width}x{height} bitmap")
        elif memory.percent > config.MEMORY_WARNING_PERCENT:
            warning = f"System memory usage high: {memory.percent:.1f}%"

        if warning:
            self.logger.warning(warning)
            if self.log_callback:
                self.log_callback(f"Resource check warning: {warning}")
        return warning

    def safe_file_operation(self, operation_func: Callable, operation_name: str,
                            *args, **kwargs) -> Any:
        """Run a file operation, surfacing OS failures as PersistenceError"""
        try:
            return operation_func(*args, **kwargs)
        except FileNotFoundError as e:
            self.logger.error(f"File not found in {operation_name}: {str(e)}")
            raise PersistenceError(f"File not found: {str(e)}") from e
        except PermissionError as e:
            self.logger.error(f"Permission denied in {operation_name}: {str(e)}")
            raise PersistenceError(f"Permission denied: {str(e)}") from e
        except OSError as e:
            self.logger.error(f"OS error in {operation_name}: {str(e)}")
            raise PersistenceError(f"OS error: {str(e)}") from e

    def cleanup_temporary_files(self, temp_paths: List[Path]) -> None:
        """Guaranteed cleanup of temporary files"""
        for temp_path in temp_paths:
            try:
                if temp_path and temp_path.exists():
                    temp_path.unlink()
                    self.logger.debug(f"Cleaned up temporary file: {temp_path}")
            except OSError as e:
                self.logger.warning(f"Could not clean up temporary file {temp_path}: {e}")
