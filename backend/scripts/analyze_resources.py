"""
Batch Quality Analysis for Exported Resources
Reads a JSON list of resource records, runs the batch analysis with optional
filters and writes the aggregated result as JSON.
"""

import os
import sys
import json
import argparse
from tqdm import tqdm

# Project paths
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, PROJECT_ROOT)

from semantic_metrics.core.config import load_config
from semantic_metrics.core.errors import ContentProcessingError
from semantic_metrics.schemas.analysis import BatchFilters
from semantic_metrics.services.batch_service import BatchOrchestrator


def load_resources(path: str) -> list:
    """Loads resource records from a JSON file.

    Args:
        path (str): Path to a JSON file holding a list of resource records,
            or an object with a "resources" list.

    Returns:
        list: The raw resource records.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("resources", [])
    return data


def main():
    """Main execution function for the batch analysis CLI."""
    parser = argparse.ArgumentParser(description="Analyze the quality of exported resources")
    parser.add_argument("input", help="JSON file with a list of resource records")
    parser.add_argument("--type", help="Only analyze resources of this type")
    parser.add_argument("--owner", type=int, help="Only analyze resources of this owner id")
    parser.add_argument("--limit", type=int, help="Maximum number of resources to analyze")
    parser.add_argument("--offset", type=int, default=0, help="Resources to skip first")
    parser.add_argument("--output", help="Write the result here instead of stdout")
    args = parser.parse_args()

    if not os.path.exists(args.input):
        print(f"Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    resources = load_resources(args.input)
    print(f"Loaded {len(resources)} resource records from {args.input}", file=sys.stderr)

    filters = BatchFilters(
        type=args.type, owner_id=args.owner, limit=args.limit, offset=args.offset
    )
    orchestrator = BatchOrchestrator(load_config())

    try:
        result = orchestrator.run(
            resources,
            filters,
            progress=lambda selected: tqdm(selected, desc="Analyzing Resources"),
        )
    except ContentProcessingError as e:
        print(f"Batch failed: {e.message}", file=sys.stderr)
        for detail in e.details:
            print(
                f"  [Resource {detail.get('resource_id')}] {detail.get('message')}",
                file=sys.stderr,
            )
        sys.exit(1)

    # Status goes to stderr so stdout holds only the JSON result
    summary = result.summary
    print(
        f"\nAnalyzed: {result.total_resources_analyzed} | Failed: {result.failed_analyses}",
        file=sys.stderr,
    )
    print(
        f"Grammar: {summary.avg_grammar:.1f}% | TTR: {summary.avg_ttr:.3f} | "
        f"Quality: {summary.overall_quality}",
        file=sys.stderr,
    )
    if result.note:
        print(f"Note: {result.note}", file=sys.stderr)

    output = json.dumps(result.to_json(), ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Result written to {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
