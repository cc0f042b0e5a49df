from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, List

from cmsgraph.core.runtime import RuntimeConfig, create_runtime, load_runtime_config
from cmsgraph.errors import CmsGraphError
from cmsgraph.utils.json_safe import to_jsonable


def _json_default(o):
    return to_jsonable(o)


def _read_json(path: str) -> Any:
    """Read a JSON file."""

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _read_json_list(path: str | None, what: str) -> List[Any]:
    """Read a JSON file holding one object or a list of objects."""

    if not path:
        return []
    data = _read_json(path)
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        # Content API search responses wrap documents in "results".
        return list(data["results"])
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    raise ValueError(f"{what} file must contain an object or a list: {path}")


def _emit(payload: Any, out: str | None) -> None:
    text = json.dumps(payload, indent=2, sort_keys=False, default=_json_default)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


def _check_inputs(*paths: str | None) -> int:
    for p in paths:
        if p and not os.path.isfile(p):
            print(f"error: file not found: {p}", file=sys.stderr)
            return 2
    return 0


def _load_config(args: argparse.Namespace) -> RuntimeConfig:
    if getattr(args, "config", None):
        return load_runtime_config(args.config)
    return RuntimeConfig()


def cmd_type_paths(args: argparse.Namespace) -> int:
    """Print the type paths declared by custom-type and shared-slice models."""

    rc = _check_inputs(args.custom_types, args.shared_slices, args.config)
    if rc:
        return rc

    try:
        runtime = create_runtime(_load_config(args))
        runtime.register_custom_type_models(_read_json_list(args.custom_types, "custom types"))
        runtime.register_shared_slice_models(_read_json_list(args.shared_slices, "shared slices"))
    except (CmsGraphError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    _emit([tp.to_payload() for tp in runtime.type_paths], args.out)
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    """Register models, normalize documents and print node snapshots."""

    rc = _check_inputs(args.custom_types, args.shared_slices, args.documents, args.config)
    if rc:
        return rc

    try:
        runtime = create_runtime(_load_config(args))
        runtime.register_custom_type_models(_read_json_list(args.custom_types, "custom types"))
        runtime.register_shared_slice_models(_read_json_list(args.shared_slices, "shared slices"))
        runtime.register_documents(_read_json_list(args.documents, "documents"))
    except (CmsGraphError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    output = {
        "nodes": [n.snapshot() for n in runtime.nodes],
        "type_paths": [tp.to_payload() for tp in runtime.type_paths],
    }
    _emit(output, args.out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    p = argparse.ArgumentParser(prog="cmsgraph", description="cmsgraph CLI")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    tp = sub.add_parser("type-paths", help="List type paths declared by schema models")
    tp.add_argument("--custom-types", help="JSON file with custom-type model(s)")
    tp.add_argument("--shared-slices", help="JSON file with shared-slice model(s)")
    tp.add_argument("--config", help="JSON runtime config file")
    tp.add_argument("--out", help="Write output to this file instead of stdout")
    tp.set_defaults(func=cmd_type_paths)

    np = sub.add_parser("normalize", help="Normalize documents into nodes")
    np.add_argument("--custom-types", help="JSON file with custom-type model(s)")
    np.add_argument("--shared-slices", help="JSON file with shared-slice model(s)")
    np.add_argument("--documents", required=True, help="JSON file with document(s) or an API response")
    np.add_argument("--config", help="JSON runtime config file")
    np.add_argument("--out", help="Write output to this file instead of stdout")
    np.set_defaults(func=cmd_normalize)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=str(args.log_level).upper(), format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
