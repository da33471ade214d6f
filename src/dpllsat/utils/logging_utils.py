"""
Structured logging utilities for SAT solving runs.

Provides a StructuredLogger that records one event per solver run (and one per
failed input) as JSON Lines or CSV, plus a NumpyJSONEncoder for statistics that
carry numpy scalars.
"""

import csv
import json
import logging
import os
import time
from datetime import datetime
from typing import Any

import numpy as np

from dpllsat.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class NumpyJSONEncoder(json.JSONEncoder):
    """JSON encoder that can handle NumPy arrays and scalars."""

    def default(self, obj):
        """Convert numpy objects to standard Python types."""
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


class StructuredLogger:
    """
    A logger for structured data in various formats.

    This logger can output data in JSON Lines or CSV format.
    It maintains separate files for different event types.
    """

    FORMAT_JSON = "json"
    FORMAT_CSV = "csv"

    def __init__(
        self,
        output_dir: str,
        experiment_name: str,
        format_type: str = "json",
    ):
        """
        Initialize the structured logger.

        Args:
            output_dir: Directory to save log files in
            experiment_name: Name of the run (used in filenames)
            format_type: Format to save logs in ("json" or "csv")

        Raises:
            ConfigurationError: If format_type is not a supported format
        """
        if format_type not in (self.FORMAT_JSON, self.FORMAT_CSV):
            raise ConfigurationError(f"Unsupported log format: {format_type}")

        self.output_dir = output_dir
        self.experiment_name = experiment_name
        self.format_type = format_type

        # Ensure the output directory exists
        os.makedirs(output_dir, exist_ok=True)

        self.files = {}
        self.write_counts = {}

        self.metadata = {
            "experiment_name": experiment_name,
            "start_time": datetime.now().isoformat(),
            "log_files": {},
        }

    def _get_file(self, event_type: str) -> tuple:
        """
        Get the file handle for a given event type.

        Args:
            event_type: Type of event (used in filename)

        Returns:
            Tuple of (file_handle, is_new)
        """
        if event_type not in self.files:
            ext = ".jsonl" if self.format_type == self.FORMAT_JSON else ".csv"
            filename = f"{self.experiment_name}_{event_type}{ext}"
            filepath = os.path.join(self.output_dir, filename)

            self.metadata["log_files"][event_type] = filepath

            file = open(
                filepath,
                "w",
                newline="" if self.format_type == self.FORMAT_CSV else None,
            )
            self.files[event_type] = file
            self.write_counts[event_type] = 0
            return file, True

        return self.files[event_type], False

    def _write_event(self, event_type: str, data: dict[str, Any]):
        """
        Write an event to the appropriate log file.

        Args:
            event_type: Type of event
            data: Data to log
        """
        file, is_new = self._get_file(event_type)

        if self.format_type == self.FORMAT_JSON:
            file.write(json.dumps(data, cls=NumpyJSONEncoder) + "\n")
        else:
            writer = csv.DictWriter(file, fieldnames=list(data.keys()))
            if is_new:
                writer.writeheader()
            writer.writerow(data)
        file.flush()

        self.write_counts[event_type] += 1

    def log_solve(
        self,
        source: str,
        status: str,
        num_vars: int,
        num_clauses: int,
        runtime: float,
        statistics: dict[str, Any] | None = None,
    ):
        """
        Log the outcome of one solver run.

        Args:
            source: Where the formula came from (file path or "<stdin>")
            status: Solver status value ("satisfiable", "unsatisfiable", ...)
            num_vars: Number of variables referenced by the formula
            num_clauses: Number of clauses in the formula
            runtime: Wall-clock solve time in seconds
            statistics: Search counters (decisions, propagations, conflicts, max_depth)
        """
        statistics = statistics or {}
        data = {
            "source": source,
            "status": status,
            "num_vars": num_vars,
            "num_clauses": num_clauses,
            "runtime": runtime,
            "decisions": statistics.get("decisions", 0),
            "propagations": statistics.get("propagations", 0),
            "conflicts": statistics.get("conflicts", 0),
            "max_depth": statistics.get("max_depth", 0),
            "timestamp": time.time(),
        }
        self._write_event("solve", data)

    def log_exception(
        self,
        source: str,
        exception_type: str,
        exception_message: str,
        stack_trace: str = "",
    ):
        """
        Log an exception.

        Args:
            source: Where the failing input came from
            exception_type: Type of the exception
            exception_message: Exception message
            stack_trace: Stack trace
        """
        data = {
            "source": source,
            "exception_type": exception_type,
            "exception_message": exception_message,
            "stack_trace": stack_trace,
            "timestamp": time.time(),
        }
        self._write_event("exception", data)

    def close(self):
        """Close all open file handles."""
        for file in self.files.values():
            file.close()
        self.files = {}

    def finalize(self) -> str:
        """
        Close all files and write the run metadata next to the logs.

        Returns:
            Path to the metadata file
        """
        self.close()

        self.metadata["end_time"] = datetime.now().isoformat()
        self.metadata["event_counts"] = dict(self.write_counts)

        metadata_path = os.path.join(
            self.output_dir, f"{self.experiment_name}_metadata.json"
        )
        with open(metadata_path, "w") as f:
            json.dump(self.metadata, f, indent=2, cls=NumpyJSONEncoder)

        logger.info(f"Structured logging finalized for run: {self.experiment_name}")
        return metadata_path


def create_logger(experiment_name=None, format_type="json", output_dir="logs"):
    """
    Create a structured logger with default settings.

    Args:
        experiment_name: Name of the run (timestamped default when omitted)
        format_type: 'json' or 'csv'
        output_dir: Directory to store log files

    Returns:
        A configured StructuredLogger instance
    """
    if experiment_name is None:
        experiment_name = f"dpllsat_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    return StructuredLogger(
        output_dir=output_dir,
        experiment_name=experiment_name,
        format_type=format_type,
    )
