"""
Encceja Report Reader: extract grades from scanned report cards

Usage:
  main.py [--config=PATH] [--output=DIR] [--verbose] FILE...
  main.py (-h | --help)

Options:
  --config=PATH  Path to YAML configuration file [default: reader_config.yml].
  --output=DIR   Directory to save JSON and CSV results.
  --verbose      Enable debug logging.
  -h --help      Show this screen.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

from docopt import docopt

from encceja_reader.analyzer import ReportCardAnalyzer
from encceja_reader.config import DEFAULT_CONFIG_PATH
from encceja_reader.config_loader import ReaderConfig, load_config
from encceja_reader.encoder import encode_file, guess_mime_type
from encceja_reader.errors import ConfigurationError
from encceja_reader.models import ReportCardData
from encceja_reader.results_writer import ResultsAggregator


def setup_logging(verbose: bool) -> None:
    """Configure root logging for the CLI run."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


def print_result_summary(source_name: str, result: ReportCardData) -> None:
    """
    Print a summary of an analyzed report card to console.

    Args:
        source_name: File the result came from.
        result: Sanitized report card.
    """
    print(f"\n  {'='*50}")
    print(f"  File: {source_name}")
    print(f"  Participant: {result.student_name or '-'}")
    print(f"  Institution: {result.certifying_institution or '-'}")
    print(f"  Passing: {'Yes' if result.is_passing else 'No'}")
    print(f"  {'='*50}")

    for field, grade in result.grades().items():
        print(f"  {field}: {'not legible' if grade is None else grade}")

    print()


async def run_reader(
    files: list[Path],
    config: ReaderConfig,
    output_dir: Path | None = None,
) -> dict[str, ReportCardData]:
    """
    Analyze each file in turn.

    Args:
        files: Report card images or PDFs.
        config: Reader configuration.
        output_dir: Optional directory to save results.

    Returns:
        Results keyed by file name, for the files that succeeded.

    Raises:
        ConfigurationError: If no API credential is configured.
    """
    analyzer = ReportCardAnalyzer(config=config)
    aggregator = ResultsAggregator(output_dir=output_dir)
    results: dict[str, ReportCardData] = {}

    for i, file_path in enumerate(files, 1):
        print(f"\n[{i}/{len(files)}] Processing {file_path.name}...")
        try:
            mime_type = guess_mime_type(file_path)
            image_base64 = await encode_file(file_path)
            result = await analyzer.analyze(image_base64, mime_type)
        except ConfigurationError:
            raise
        except Exception as e:
            print(f"  Failed to analyze {file_path.name}: {e}")
            continue

        results[file_path.name] = result
        aggregator.add_result(file_path.name, result)
        print_result_summary(file_path.name, result)

        if config.verbose:
            print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))

    if output_dir and results:
        print("\nSaving results...")
        output_files = aggregator.save_all()
        print(f"  Summary JSON: {output_files.get('summary_json')}")
        print(f"  Summary CSV:  {output_files.get('summary_csv')}")

    return results


def main() -> int:
    """
    Main CLI entrypoint.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    arguments = docopt(__doc__)
    config_path = Path(arguments["--config"])

    try:
        if config_path.exists():
            config = load_config(config_path)
            print(f"Loaded configuration from {config_path}")
        elif config_path == DEFAULT_CONFIG_PATH:
            config = ReaderConfig()
        else:
            print(f"Error: Configuration file not found at {config_path}")
            return 1
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    if arguments["--verbose"]:
        config.verbose = True
    setup_logging(config.verbose)

    output_dir = Path(arguments["--output"]) if arguments["--output"] else config.output_dir
    files = [Path(f) for f in arguments["FILE"]]

    missing = [f for f in files if not f.exists()]
    if missing:
        for f in missing:
            print(f"Error: File not found: {f}")
        return 1

    try:
        results = asyncio.run(run_reader(files, config, output_dir=output_dir))
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1

    print("\n" + "=" * 60)
    print("EXTRACTION COMPLETE")
    print("=" * 60)
    print(f"Report cards analyzed: {len(results)}/{len(files)}")

    return 0 if len(results) == len(files) else 1


if __name__ == "__main__":
    sys.exit(main())
