import json, pathlib, sys

from fastapi.openapi.utils import get_openapi
from apps.api.main import app

out = pathlib.Path(sys.argv[1] if len(sys.argv) > 1 else "openapi.json")
schema = get_openapi(
    title=app.title,
    version=app.version,
    description=app.description,
    routes=app.routes,
)
out.write_text(json.dumps(schema, indent=2))
print(f"Wrote {out}")
