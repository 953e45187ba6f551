"""Image bytes, resized on request."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ...services.image_delivery import ImageDeliveryService
from ..dependencies import get_delivery

router = APIRouter(prefix="/images", tags=["Images"])

CACHE_CONTROL = "public, max-age=31536000"


def _etag_matches(if_none_match: str | None, etag: str) -> bool:
    if not if_none_match:
        return False
    candidates = [candidate.strip() for candidate in if_none_match.split(",")]
    return "*" in candidates or any(candidate.removeprefix("W/") == etag for candidate in candidates)


@router.get("/{namespace}/{filename}")
def fetch_image(
    namespace: str,
    filename: str,
    request: Request,
    size: str | None = None,
    delivery: ImageDeliveryService = Depends(get_delivery),
) -> Response:
    image = delivery.fetch(namespace, filename, size)

    etag = f'"{image.etag}"'
    headers = {"ETag": etag, "Cache-Control": CACHE_CONTROL}

    if _etag_matches(request.headers.get("if-none-match"), etag):
        return Response(status_code=304, headers=headers)

    return Response(content=image.data, media_type=image.content_type, headers=headers)
