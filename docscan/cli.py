"""Command-line interface for scanning OCR fragment files and CSV export.

Provides subcommands for scanning a single fragments file, scanning a
folder of fragment files into a CSV report, and listing document types.
"""

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any

from docscan.models.document_type import DocumentType
from docscan.models.results import ScanResult
from docscan.ocr.fragments import TextFragment
from docscan.pipeline import ScanPipeline
from docscan.utils.config import ScannerConfig, load_config
from docscan.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_META_COLUMNS = [
    "filename",
    "status",
    "document_kind",
    "confidence",
    "error",
]


def load_fragments(path: Path) -> list[TextFragment]:
    """Read fragments from a JSON file.

    The file holds either a list of fragment objects or an object with a
    ``fragments`` list.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed fragments in file order.

    Raises:
        ValueError: If the JSON does not have one of the supported shapes
            or an item is not a valid fragment object.
    """
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("fragments")
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a fragment list")
    fragments: list[TextFragment] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: fragment {i} is not an object")
        try:
            fragments.append(TextFragment.from_dict(item))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"{path}: fragment {i} is invalid: {exc}") from exc
    return fragments


def _build_config(threshold: float | None) -> ScannerConfig:
    config = load_config().scanner
    if threshold is not None:
        config = config.model_copy(update={"confidence_threshold": threshold})
    return config


def scan_file(
    path: Path,
    pipeline: ScanPipeline,
    allowed_types: list[DocumentType] | None = None,
) -> ScanResult:
    """Scan a single fragments file."""
    return pipeline.scan(load_fragments(path), allowed_types)


def _result_row(filename: str, result: ScanResult) -> dict[str, object]:
    """Flatten a scan result into one CSV row with masked values."""
    data = result.to_dict(mask_sensitive=True)
    row: dict[str, object] = {"filename": filename, "status": data["status"]}
    if result.is_success:
        row["document_kind"] = data["document"]["kind"]
        row["confidence"] = data["document"]["overall_confidence"]
        row.update(data["summary"])
    elif result.is_unclear:
        row["confidence"] = round(data["confidence"], 4)
    else:
        row["error"] = data["message"]
    return row


def process_folder(
    input_dir: Path,
    output_csv: Path,
    threshold: float | None = None,
    verbose: bool = False,
) -> dict[str, int]:
    """Scan every JSON fragments file in a folder and export results to CSV.

    Args:
        input_dir: Directory containing ``*.json`` fragment files.
        output_csv: Path for the output CSV file.
        threshold: Optional confidence threshold override.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, success, unclear and failed counts.
    """
    pipeline = ScanPipeline(config=_build_config(threshold))

    files = sorted(input_dir.glob("*.json"))
    if not files:
        logger.warning("No fragment files found in %s", input_dir)
        return {"total": 0, "success": 0, "unclear": 0, "failed": 0}

    logger.info("Found %d fragment files to scan", len(files))

    rows: list[dict[str, object]] = []
    counts = {"success": 0, "unclear": 0, "failed": 0}

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Scanning [{i}/{len(files)}]: {file_path.name}")

        try:
            result = scan_file(file_path, pipeline)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s", file_path.name, exc)
            rows.append(
                {"filename": file_path.name, "status": "failed", "error": str(exc)}
            )
            counts["failed"] += 1
            continue

        rows.append(_result_row(file_path.name, result))
        if result.is_success:
            counts["success"] += 1
        elif result.is_unclear:
            counts["unclear"] += 1
        else:
            counts["failed"] += 1

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), **counts}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write scan results to a CSV file.

    Args:
        results: List of result rows.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    all_keys: set[str] = set()
    for r in results:
        all_keys.update(r.keys())

    field_columns = sorted(all_keys - set(_META_COLUMNS))
    columns = [c for c in _META_COLUMNS if c in all_keys] + field_columns

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Scan Complete")
    print(f"{'=' * 50}")
    print(f"Total:   {summary['total']}")
    print(f"Success: {summary['success']}")
    print(f"Unclear: {summary['unclear']}")
    print(f"Failed:  {summary['failed']}")
    print(f"Output:  {output_csv}")


def _print_types() -> None:
    for doc_type in DocumentType:
        print(
            f"{doc_type.value:<24}{doc_type.display_name:<26}"
            f"{doc_type.recommended_confidence_threshold:.2f}"
        )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Document Scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser("scan", help="Scan a JSON fragments file")
    scan_parser.add_argument("file", type=Path, help="Fragments JSON file")
    scan_parser.add_argument(
        "-t",
        "--type",
        type=DocumentType.from_identifier,
        choices=list(DocumentType),
        action="append",
        dest="doc_types",
        help="Restrict classification to this type (repeatable)",
    )
    scan_parser.add_argument(
        "--threshold", type=float, help="Override the confidence threshold"
    )
    scan_parser.add_argument(
        "--no-mask", action="store_true", help="Show identifiers unmasked"
    )
    scan_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    batch_parser = subparsers.add_parser(
        "batch", help="Scan a folder of fragment files"
    )
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with JSON fragment files"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "--threshold", type=float, help="Override the confidence threshold"
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    subparsers.add_parser("types", help="List supported document types")

    args = parser.parse_args(argv)

    if args.command == "types":
        _print_types()
        return

    app_config = load_config()
    setup_logging(
        app_config.effective_log_level,
        app_config.scanner.mask_sensitive_data_in_logs,
    )

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.threshold, args.verbose)
    elif args.command == "scan":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        pipeline = ScanPipeline(config=_build_config(args.threshold))
        try:
            result = scan_file(args.file, pipeline, args.doc_types)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)

        output: dict[str, Any] = result.to_dict(mask_sensitive=not args.no_mask)
        output_str = json.dumps(output, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
