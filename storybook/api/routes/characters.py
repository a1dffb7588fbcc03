"""Character reference portrait endpoint."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from storybook.core.errors import GenerationFailure
from ..dependencies import Previews
from ..models.requests import CharacterPortraitRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/portrait",
    summary="Generate a character portrait",
    description="Generate a front-facing, full-body reference portrait of a character on a white background.",
    responses={
        200: {"content": {"image/png": {}}},
        502: {"description": "Image provider failed"},
    },
)
async def create_portrait(request: CharacterPortraitRequest, previews: Previews):
    """Generate a standalone character reference image."""
    try:
        image = await previews.generate_portrait(request)
    except GenerationFailure as e:
        logger.error(f"Portrait generation failed for {request.name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    return Response(content=image.image_bytes, media_type=image.mime_type)
