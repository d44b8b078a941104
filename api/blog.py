"""
Blog endpoints (read-only static catalog)
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from services import blog_service

router = APIRouter(tags=["blog"])


@router.get("/", summary="List blog posts")
async def list_posts(
    category: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    author: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    page: int = Query(1, ge=1),
):
    result = blog_service.list_posts(category, tag, author, search, limit, page)
    return {
        "success": True,
        "count": len(result["items"]),
        "total": result["total"],
        "pagination": result["pagination"],
        "data": result["items"],
    }


@router.get("/categories")
async def list_categories():
    categories = blog_service.categories()
    return {"success": True, "count": len(categories), "data": categories}


@router.get("/tags")
async def list_tags():
    tags = blog_service.tags()
    return {"success": True, "count": len(tags), "data": tags}


@router.get("/featured")
async def featured_posts():
    posts = blog_service.featured()
    return {"success": True, "count": len(posts), "data": posts}


@router.get("/search", summary="Search blog posts")
async def search_posts(q: Optional[str] = Query(None), limit: int = Query(10, ge=1, le=100)):
    if not q:
        raise HTTPException(status_code=400, detail="Search query is required")
    results = blog_service.search_posts(q)
    return {"success": True, "count": len(results), "query": q, "data": results[:limit]}


def _get_post_or_404(post_id: int) -> dict:
    post = blog_service.get_post(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.get("/{post_id}")
async def get_post(post_id: int):
    return {"success": True, "data": _get_post_or_404(post_id)}


@router.get("/{post_id}/related")
async def related_posts(post_id: int):
    related = blog_service.related_posts(_get_post_or_404(post_id))
    return {"success": True, "count": len(related), "data": related}
