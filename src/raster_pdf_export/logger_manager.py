"""
Logger Manager Module
Manages session logging for PDF export operations
"""

import json
import logging
from datetime import datetime
from pathlib import Path


class LoggerManager:
    """Manages logging for export operations"""

    def __init__(self, log_directory=None, log_callback=None):
        """
        Initialize the logger manager

        Args:
            log_directory (str): Directory for log files (optional)
            log_callback: Optional callback function for real-time logging
        """
        self.log_callback = log_callback
        self.log_directory = log_directory
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.logger = logging.getLogger(f"raster_pdf_export.session.{self.session_id}")

        self.export_log = {
            'session_id': self.session_id,
            'start_time': datetime.now().isoformat(),
            'exports_started': [],
            'pages_placed': [],
            'files_saved': [],
            'export_errors': [],
            'statistics': {}
        }

        if self.log_directory:
            self.setup_file_logging()

    def log(self, message, level='INFO'):
        """Log a message with timestamp"""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        formatted_message = f"[{timestamp}] [{level}] {message}"

        if self.log_callback:
            self.log_callback(formatted_message)

        self.logger.log(getattr(logging, level, logging.INFO), message)

    def setup_file_logging(self):
        """Set up file-based logging"""
        log_dir = Path(self.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_path = log_dir / f"pdf_export_{self.session_id}.log"

        self.logger.setLevel(logging.DEBUG)
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
            handler.close()

        file_handler = logging.FileHandler(str(log_path), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        self.logger.addHandler(file_handler)
        self.log_path = log_path

        self.log(f"File logging initialized: {log_path}")

    def close(self):
        """Detach and close file handlers"""
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
            handler.close()

    def log_export_started(self, pipeline_type, source, filename):
        entry = {
            'pipeline': pipeline_type,
            'source': str(source),
            'filename': str(filename),
            'timestamp': datetime.now().isoformat()
        }
        self.export_log['exports_started'].append(entry)
        self.log(f"Starting {pipeline_type} export: {source} -> {filename}")

    def log_bitmap(self, description, width, height):
        self.log(f"{description}: {width}x{height}px", 'DEBUG')

    def log_page_placed(self, filename, page_number, placement):
        """Log one image placed on a page"""
        entry = {
            'filename': str(filename),
            'page': page_number,
            'x': round(placement.x, 3),
            'y': round(placement.y, 3),
            'width': round(placement.width, 3),
            'height': round(placement.height, 3),
            'bytes': placement.byte_size
        }
        self.export_log['pages_placed'].append(entry)
        self.log(f"Page {page_number}: {placement.width:.1f}x{placement.height:.1f}mm "
                 f"at ({placement.x:.1f}, {placement.y:.1f})", 'DEBUG')

    def log_file_saved(self, path, page_count):
        entry = {
            'file': str(path),
            'pages': page_count,
            'timestamp': datetime.now().isoformat()
        }
        self.export_log['files_saved'].append(entry)
        self.log(f"Saved: {Path(path).name} ({page_count} page{'s' if page_count != 1 else ''})")

    def log_export_error(self, filename, error, operation):
        """Log a failed export"""
        entry = {
            'filename': str(filename),
            'error': str(error),
            'error_type': type(error).__name__,
            'operation': operation,
            'timestamp': datetime.now().isoformat()
        }
        self.export_log['export_errors'].append(entry)
        self.log(f"Export error in {operation}: {Path(str(filename)).name} - {error}", 'ERROR')

    def finalize_session(self):
        """Finalize the session and generate final statistics"""
        self.export_log['end_time'] = datetime.now().isoformat()

        stats = {
            'total_exports_started': len(self.export_log['exports_started']),
            'total_files_saved': len(self.export_log['files_saved']),
            'total_pages_placed': len(self.export_log['pages_placed']),
            'total_export_errors': len(self.export_log['export_errors']),
            'success_rate': 0
        }

        if stats['total_exports_started'] > 0:
            stats['success_rate'] = (stats['total_files_saved'] / stats['total_exports_started']) * 100

        self.export_log['statistics'] = stats

        self.log("=== EXPORT SESSION COMPLETE ===")
        self.log(f"Exports started: {stats['total_exports_started']}")
        self.log(f"Files saved: {stats['total_files_saved']}")
        self.log(f"Pages placed: {stats['total_pages_placed']}")
        self.log(f"Export errors: {stats['total_export_errors']}")
        self.log(f"Success rate: {stats['success_rate']:.1f}%")

        return stats

    def save_log_file(self, output_directory):
        """Save the session log in JSON format"""
        if not output_directory:
            return None

        log_dir = Path(output_directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"export_log_{self.session_id}.json"

        with open(log_path, 'w', encoding='utf-8') as f:
            json.dump(self.export_log, f, indent=2, ensure_ascii=False)

        self.log(f"Log file saved: {log_path}")
        return str(log_path)

    def get_export_statistics(self):
        """Get current export statistics"""
        return self.export_log.get('statistics', {})
