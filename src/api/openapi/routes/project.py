"""Project template endpoints."""

from typing import Any

from fastapi import APIRouter

from src.api.dependencies import TemplateServiceDep

router = APIRouter()


@router.get(
    "/project/template",
    response_model=list[dict[str, Any]],
    summary="List project templates",
    description="Return every document in the project template collection.",
)
async def get_template(service: TemplateServiceDep) -> list[dict[str, Any]]:
    """List the templates a scaffolding client can start a project from."""
    return await service.list_templates()
