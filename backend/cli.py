"""
Command-line interface for the workout structure editor.

Commands:
    normalize  Fill in missing identifiers
    edit       Apply a file of edit operations
    summary    Print counts and identifier problems

Workout and operation files may be JSON or YAML (chosen by extension).

Examples:
    python -m backend.cli normalize workout.json -o normalized.json
    python -m backend.cli edit workout.yaml ops.yaml --format yaml
    python -m backend.cli summary workout.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from application.use_cases import EditWorkoutUseCase
from backend.settings import get_settings
from domain.converters import workout_from_payload, workout_to_payload
from domain.models.edit_operation import EditOperationList
from domain.services.id_allocator import IdAllocator
from domain.services.invariants import find_invariant_violations
from domain.services.normalizer import normalize


def _load(path: str) -> Any:
    """Load a JSON or YAML document from disk."""
    text = Path(path).read_text()
    if Path(path).suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def _dump(data: Dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False)
    return json.dumps(data, indent=2)


def _write(text: str, output: Optional[str] = None) -> None:
    if output:
        Path(output).write_text(text)
    else:
        print(text)


def cmd_normalize(args: argparse.Namespace, allocator: IdAllocator) -> int:
    workout = normalize(workout_from_payload(_load(args.input)), allocator)
    _write(_dump(workout_to_payload(workout), args.format), args.output)
    return 0


def cmd_edit(args: argparse.Namespace, allocator: IdAllocator) -> int:
    settings = get_settings()
    workout = workout_from_payload(_load(args.input))

    raw_ops = _load(args.operations)
    if isinstance(raw_ops, list):
        raw_ops = {"operations": raw_ops}
    operations = EditOperationList.model_validate(raw_ops).operations

    use_case = EditWorkoutUseCase(allocator=allocator, defaults=settings.editor_defaults)
    result = use_case.execute(workout=workout, operations=operations)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        for message in result.validation_errors:
            print(f"  - {message}", file=sys.stderr)
        return 2

    _write(_dump(workout_to_payload(result.workout), args.format), args.output)
    print(f"Applied {result.changes_applied} changes", file=sys.stderr)
    return 0


def cmd_summary(args: argparse.Namespace, allocator: IdAllocator) -> int:
    workout = workout_from_payload(_load(args.input))
    print(f"Title:     {workout.title or '(untitled)'}")
    print(f"Blocks:    {workout.block_count}")
    print(f"Supersets: {workout.total_supersets}")
    print(f"Exercises: {workout.total_exercises}")
    for index, block in enumerate(workout.blocks):
        print(f"  [{index}] {block}")

    violations = find_invariant_violations(workout)
    if violations:
        print("Identifier problems (run 'normalize' to fix):")
        for message in violations:
            print(f"  - {message}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Edit the structure of workout documents")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_output_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("-o", "--output", help="Output file path (default: stdout)")
        sub.add_argument(
            "--format", choices=["json", "yaml"], default="json", help="Output format"
        )

    normalize_parser = subparsers.add_parser("normalize", help="Fill in missing identifiers")
    normalize_parser.add_argument("input", help="Workout JSON/YAML file path")
    add_output_args(normalize_parser)
    normalize_parser.set_defaults(handler=cmd_normalize)

    edit_parser = subparsers.add_parser("edit", help="Apply edit operations")
    edit_parser.add_argument("input", help="Workout JSON/YAML file path")
    edit_parser.add_argument("operations", help="Operations JSON/YAML file path")
    add_output_args(edit_parser)
    edit_parser.set_defaults(handler=cmd_edit)

    summary_parser = subparsers.add_parser("summary", help="Print workout counts")
    summary_parser.add_argument("input", help="Workout JSON/YAML file path")
    summary_parser.set_defaults(handler=cmd_summary)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    allocator = IdAllocator(prefix=get_settings().id_prefix)

    try:
        return args.handler(args, allocator)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        print(f"Error: Invalid input file: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # pydantic.ValidationError and non-object payload nodes
        print(f"Error: Invalid workout or operations: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
