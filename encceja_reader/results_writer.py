"""
Results aggregator for batch report card extraction.

Saves results to a centralized folder with JSON and CSV summaries.
"""

import csv
import json
from datetime import datetime
from pathlib import Path

from .config import (
    DEFAULT_OUTPUT_DIR,
    GRADE_FIELDS,
    RESULTS_CSV_FILENAME,
    RESULTS_SUMMARY_FILENAME,
)
from .models import ReportCardData


class ResultsAggregator:
    """
    Collects analyzed report cards and exports them to JSON and CSV.
    """

    def __init__(self, output_dir: Path | None = None) -> None:
        """
        Initialize the results aggregator.

        Args:
            output_dir: Directory to save results. Defaults to ./results/
        """
        self.output_dir = output_dir or DEFAULT_OUTPUT_DIR
        self.results: dict[str, ReportCardData] = {}
        self.timestamp = datetime.now().isoformat()

    def add_result(self, source_name: str, result: ReportCardData) -> None:
        """
        Add an analyzed report card.

        Args:
            source_name: Name of the file the result came from.
            result: Sanitized report card.
        """
        self.results[source_name] = result

    def save_all(self) -> dict[str, Path]:
        """
        Save all results to the output directory.

        Creates:
        - Individual JSON files per source file
        - Summary JSON with all results
        - Summary CSV

        Returns:
            Dictionary of output file paths.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        output_files: dict[str, Path] = {}

        for source_name, result in sorted(self.results.items()):
            individual_path = self.output_dir / f"{Path(source_name).stem}.json"
            with open(individual_path, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            output_files[source_name] = individual_path

        summary_path = self.output_dir / RESULTS_SUMMARY_FILENAME
        summary_data = {
            "timestamp": self.timestamp,
            "total_report_cards": len(self.results),
            "statistics": self._calculate_statistics(),
            "results": {name: result.to_dict() for name, result in sorted(self.results.items())},
        }
        with open(summary_path, "w", encoding="utf-8") as f:
            json.dump(summary_data, f, indent=2, ensure_ascii=False)
        output_files["summary_json"] = summary_path

        csv_path = self.output_dir / RESULTS_CSV_FILENAME
        self._save_csv(csv_path)
        output_files["summary_csv"] = csv_path

        return output_files

    def _calculate_statistics(self) -> dict:
        """
        Calculate summary statistics for all results.

        Returns:
            Dictionary with passing counts and per-area averages.
        """
        if not self.results:
            return {}

        passing = sum(1 for r in self.results.values() if r.is_passing)
        averages = {}
        for field in GRADE_FIELDS:
            values = [r.grades()[field] for r in self.results.values() if r.grades()[field] is not None]
            averages[field] = sum(values) / len(values) if values else None

        return {
            "passing_count": passing,
            "passing_percent": (passing / len(self.results)) * 100,
            "average_grades": averages,
        }

    def _save_csv(self, csv_path: Path) -> None:
        """
        Save results as CSV file.

        Args:
            csv_path: Path to save CSV file.
        """
        header = ["source_file", *GRADE_FIELDS, "studentName", "certifyingInstitution", "isPassing"]

        with open(csv_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header)

            for source_name, result in sorted(self.results.items()):
                grades = result.grades()
                row = [source_name]
                row.extend("" if grades[field] is None else grades[field] for field in GRADE_FIELDS)
                row.extend([
                    result.student_name or "",
                    result.certifying_institution or "",
                    "Yes" if result.is_passing else "No",
                ])
                writer.writerow(row)
