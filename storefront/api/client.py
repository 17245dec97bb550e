# storefront/api/client.py
# Раздача собранного клиента и fallback на index.html для маршрутов SPA.
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

router = APIRouter()


def _resolve_asset(client_dir: Path, path: str) -> Path | None:
    """Файл внутри client_dir или None; выход за пределы каталога запрещён."""
    if not path:
        return None
    candidate = (client_dir / path).resolve()
    try:
        candidate.relative_to(client_dir)
    except ValueError:
        return None
    return candidate if candidate.is_file() else None


@router.get("/{full_path:path}", include_in_schema=False)
def serve_client(full_path: str, request: Request):
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")

    client_dir = Path(request.app.state.settings.CLIENT_DIR).resolve()
    asset = _resolve_asset(client_dir, full_path)
    if asset is not None:
        return FileResponse(asset)

    index = client_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Client is not built")
    return FileResponse(index)


@router.api_route(
    "/{full_path:path}",
    methods=["POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def unknown_route(full_path: str):
    """Неизвестные маршруты с другими методами — JSON 404, а не 405."""
    raise HTTPException(status_code=404, detail="Not Found")
