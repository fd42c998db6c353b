import json
import sys

from launchpilot.config.env import configure_logging
from .errors import ValidationError
from .inputs import parse_inputs
from .insights import build_projection


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m launchpilot.projections.cli <inputs.json | ->", file=sys.stderr)
        return 2
    configure_logging()
    try:
        if args[0] == "-":
            payload = json.load(sys.stdin)
        else:
            with open(args[0], "r") as f:
                payload = json.load(f)
    except OSError as e:
        print(f"cannot read {args[0]}: {e.strerror or e}", file=sys.stderr)
        return 2
    except json.JSONDecodeError as e:
        print(f"invalid JSON in {args[0]}: {e}", file=sys.stderr)
        return 1
    try:
        inputs = parse_inputs(payload)
    except ValidationError as e:
        print(json.dumps({"error": e.message, "details": e.details}, indent=2), file=sys.stderr)
        return 1
    print(json.dumps(build_projection(inputs), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
