"""Export functionality for search results (CSV, JSON)."""

import csv
import io
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from .constants import CSV_HEADERS
from .models import CandidateRecord, SearchResult

logger = logging.getLogger(__name__)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def candidate_to_row(candidate: CandidateRecord) -> list[str]:
    """
    Flatten a candidate into the CSV column order.

    Relationship prefers the human label over the type; source prefers
    the display name over the id.
    """
    return [
        _cell(candidate.full_name),
        _cell(candidate.relationship_label or candidate.relationship_type),
        _cell(candidate.age),
        _cell(candidate.gender),
        _cell(candidate.city),
        _cell(candidate.state),
        _cell(candidate.phone),
        _cell(candidate.email),
        f"{candidate.confidence}%",
        _cell(candidate.source_name or candidate.source_id),
        _cell(candidate.notes),
    ]


def export_csv_string(candidates: list[CandidateRecord]) -> str:
    """
    Export candidates to a CSV string.

    The header line is unquoted; every data cell is quoted with embedded
    quotes doubled. Lines are joined with "\\n" and there is no trailing
    newline. An empty list yields the header alone.

    Args:
        candidates: Candidates in display order

    Returns:
        CSV content as string
    """
    header = ",".join(CSV_HEADERS)
    if not candidates:
        return header

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for candidate in candidates:
        writer.writerow(candidate_to_row(candidate))

    return header + "\n" + output.getvalue()[:-1]


def export_json_string(result: SearchResult, pretty: bool = True) -> str:
    """
    Export a full search result, facets included, to a JSON string.

    Args:
        result: Search result to serialize
        pretty: Whether to format JSON with indentation
    """
    return json.dumps(result.to_dict(), indent=2 if pretty else None, default=str)


def export_to_csv(result: SearchResult, output_path: str) -> str:
    """
    Export result candidates to a CSV file.

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(export_csv_string(result.results))

    logger.info("Exported %d candidates to %s", len(result.results), output_path)
    return str(output_path)


def export_to_json(result: SearchResult, output_path: str, pretty: bool = True) -> str:
    """
    Export a search result to a JSON file.

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "exported_at": datetime.now().isoformat(),
        **result.to_dict(),
    }

    with open(output_path, "w", encoding="utf-8") as f:
        if pretty:
            json.dump(data, f, indent=2, default=str)
        else:
            json.dump(data, f, default=str)

    logger.info("Exported %d candidates to %s", len(result.results), output_path)
    return str(output_path)


def export_results(result: SearchResult, output_path: str, format: str = "csv") -> str:
    """
    Export a search result to file in the specified format.

    Args:
        result: Search result to export
        output_path: Path to output file
        format: Output format ("csv" or "json")

    Returns:
        Path to the created file
    """
    if format.lower() == "json":
        return export_to_json(result, output_path)
    else:
        return export_to_csv(result, output_path)
