"""Lesson content endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, status

from guitarlab.core.catalog import (
    ContentNotFoundError,
    PathTraversalError,
    UnknownCategoryError,
    build_catalog,
    read_article,
)
from guitarlab.web.schemas import ArticleContentResponse, CatalogItemResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/content", tags=["content"])


@router.get("/catalog", response_model=dict[str, list[CatalogItemResponse]])
def get_catalog() -> dict[str, list[CatalogItemResponse]]:
    """Lessons of every category with forward links and backlinks."""
    catalog = build_catalog()

    logger.info("catalog_list", categories=len(catalog))

    return {
        category: [CatalogItemResponse.model_validate(item) for item in items]
        for category, items in catalog.items()
    }


@router.get("/{category}/{filename:path}", response_model=ArticleContentResponse)
def get_article(category: str, filename: str) -> ArticleContentResponse:
    """Raw markdown of one lesson."""
    try:
        content = read_article(category, filename)
    except UnknownCategoryError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PathTraversalError as e:
        logger.warning("content.path_traversal", category=category, filename=filename)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    return ArticleContentResponse(content=content)
