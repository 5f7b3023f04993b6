from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import Response
from loguru import logger

from src.students.template.constants import TemplateVariant
from src.students.template.service import build_template

router = APIRouter()

@router.get(
    "",
    description="Downloads an upload template: `students` (xlsx, full upload) or `names` (csv).",
    response_description="Template file attachment",
    status_code=status.HTTP_200_OK,
)
def download_template(variant: str = Query(default=TemplateVariant.STUDENTS.value)) -> Response:
    try:
        template_variant = TemplateVariant(variant)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown template variant '{variant}'. Use one of: {', '.join(v.value for v in TemplateVariant)}",
        )

    content, media_type, filename = build_template(template_variant)
    logger.info("Serving {} template ({} bytes)", template_variant.value, len(content))
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
