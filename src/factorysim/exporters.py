"""Exporters."""


import csv
import logging

from factorysim.errors import ReportError

logger = logging.getLogger(__name__)


def get_exporter_by_type(exporter: str):
    """Get exporter based on given type."""
    exporter = exporter.strip().lower()
    if exporter == "text":
        return TextReportExporter
    elif exporter == "csv":
        return CSVExporter
    else:
        raise ValueError(f"Unknown exporter '{exporter}'")


def format_report(statistics) -> str:
    """Plain text results report."""
    lines = ["Resource Usage Times:"]
    for resource_class, value in statistics.usage_time.items():
        lines.append(f"{resource_class}: {value:g} time units")
    lines.append("Resource Waiting Times:")
    for resource_class, value in statistics.waiting_time.items():
        lines.append(f"{resource_class}: {value:g} time units")
    lines.append(f"Total finished products: {statistics.finished_count}")
    for product_type, count in statistics.finished_by_type.items():
        lines.append(f"{product_type}: {count} units")
    return "\n".join(lines) + "\n"


class Exporter:
    def __init__(self, filepath: str):
        self.filepath = filepath

    def export(self, simulation):
        raise NotImplementedError


class TextReportExporter(Exporter):
    """Write the results report of a finished run."""

    def export(self, simulation):
        try:
            with open(self.filepath, "w") as f:
                f.write(format_report(simulation.statistics))
        except OSError as e:
            raise ReportError(self.filepath, e.strerror or str(e)) from e
        logger.info(f"Wrote report to {self.filepath}")


class CSVExporter(Exporter):
    """Write every dispatched event as a CSV row."""

    def export(self, simulation):
        rows = [event.as_dict() for event in simulation.history]
        fieldnames = ["seq", "time", "kind"]
        for row in rows:
            fieldnames.extend(k for k in row if k not in fieldnames)

        try:
            with open(self.filepath, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(rows)
        except OSError as e:
            raise ReportError(self.filepath, e.strerror or str(e)) from e
        logger.info(f"Wrote {len(rows)} events to {self.filepath}")
