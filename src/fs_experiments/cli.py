"""
Experiment cookie inspection CLI.

Examples:
  python -m fs_experiments decode "u=42,a=myapp,s=s1,v=10,b=B1" --config experiments.yaml
  python -m fs_experiments decode "$COOKIE" --config experiments.yaml --json
  python -m fs_experiments encode "$COOKIE" --config experiments.yaml
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from .codec import decode, encode
from .config_loader import ExperimentSettings, load_settings
from .exceptions import ExperimentError
from .models import AppExperiments, GlobalExperimentState
from .template_registry import TemplateRegistry


def state_to_dict(state: GlobalExperimentState) -> Dict[str, Any]:
    apps: Dict[str, Any] = {}
    for name, entry in state.apps.items():
        if isinstance(entry, AppExperiments):
            apps[name] = {
                "stamp": entry.stamp,
                "bucket": entry.bucket,
                "wire_version": entry.wire_version,
                "features": entry.features,
            }
        else:
            apps[name] = {"opaque": entry.raw}
    return {"user_id": state.user_id, "apps": apps}


def build_table(state: GlobalExperimentState) -> Table:
    table = Table(title=f"Experiments for user {state.user_id or '<unknown>'}")
    table.add_column("App", style="cyan")
    table.add_column("Stamp")
    table.add_column("Bucket")
    table.add_column("Feature")
    table.add_column("Value", justify="right")

    for name, entry in state.apps.items():
        if not isinstance(entry, AppExperiments):
            table.add_row(name, "", "", "[dim]opaque[/dim]", entry.raw)
            continue
        if not entry.features:
            table.add_row(name, entry.stamp, entry.bucket, "", "")
        for feature, value in entry.features.items():
            if isinstance(value, dict):
                for variant, selected in value.items():
                    table.add_row(
                        name, entry.stamp, entry.bucket, f"{feature}#{variant}", str(selected)
                    )
            else:
                table.add_row(name, entry.stamp, entry.bucket, feature, str(value))
    return table


def _load_registry(config_path: Optional[str]) -> TemplateRegistry:
    settings = load_settings(config_path) if config_path else ExperimentSettings()
    return TemplateRegistry(settings.templates)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Inspect and normalize experiment cookies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_parser = subparsers.add_parser("decode", help="Decode a cookie value")
    decode_parser.add_argument("cookie", help="Raw fs_experiments cookie value")
    decode_parser.add_argument("--config", "-c", help="YAML file with feature templates")
    decode_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    encode_parser = subparsers.add_parser("encode", help="Decode and re-encode a cookie value")
    encode_parser.add_argument("cookie", help="Raw fs_experiments cookie value")
    encode_parser.add_argument("--config", "-c", help="YAML file with feature templates")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    console = Console()
    try:
        registry = _load_registry(args.config)
    except ExperimentError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return 1

    state = decode(args.cookie, registry)
    if args.command == "encode":
        print(encode(state, registry))
    elif args.json:
        console.print_json(json.dumps(state_to_dict(state)))
    else:
        console.print(build_table(state))
    return 0


if __name__ == "__main__":
    sys.exit(main())
