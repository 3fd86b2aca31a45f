"""
Write the OpenAPI document for the service to interfaces/openapi.json.

Usage:
    python -m clubs_api.api.generate_openapi [output_dir]
"""

import json
import sys
from pathlib import Path

from clubs_api.api.main import app


def main(output_dir: str = "interfaces") -> Path:
    schema = app.openapi()
    # Session-bound CSRF header required by every mutating route
    schema.setdefault("components", {})["x-csrf"] = {
        "header": "X-CSRF-Token",
        "issued_by": "/api/v1/csrf-token",
        "applies_to": ["POST", "PUT", "DELETE"],
    }

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    output_path = out / "openapi.json"
    output_path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
    return output_path


if __name__ == "__main__":
    print(main(*sys.argv[1:2]))
