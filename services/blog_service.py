"""
Blog catalog service
Posts are a static in-process catalog; filtering mirrors the public blog page.
"""
import math
from typing import Any, Dict, List, Optional

POSTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "How To Build Your Own Workout Routine: Plans, Schedules, and Exercises",
        "author": "Steve Kamb",
        "content": (
            "Building your own workout routine can seem overwhelming, but it doesn't have to be. "
            "This comprehensive guide will walk you through the process of creating a personalized "
            "fitness plan that works for your goals, schedule, and fitness level..."
        ),
        "excerpt": "Explore intelligent workout strategies",
        "image": "images/blog/blog1.jpg",
        "category": "workout",
        "tags": ["workout routine", "fitness planning", "exercise"],
        "published_at": "2023-12-01",
        "read_time": "8 min read",
        "url": "https://www.nerdfitness.com/blog/how-to-build-your-own-workout-routine/",
    },
    {
        "id": 2,
        "title": "6 Beginner Gym Workouts: How to Work Out in a Gym The Right Way!",
        "author": "Steve Kamb",
        "content": (
            "Starting your fitness journey at the gym can be intimidating, but with the right approach, "
            "you can build confidence and see real results. This guide covers everything from proper "
            "form to workout structure..."
        ),
        "excerpt": "Dynamic workouts for holistic fitness",
        "image": "images/blog/blog2.jpg",
        "category": "beginner",
        "tags": ["beginner workout", "gym tips", "fitness"],
        "published_at": "2023-11-15",
        "read_time": "12 min read",
        "url": "https://www.nerdfitness.com/blog/a-beginners-guide-to-the-gym-everything-you-need-to-know/",
    },
    {
        "id": 3,
        "title": "Strength Training For Women: 7 Things You Should Know First Beforehand!",
        "author": "Staci Ardison",
        "content": (
            "Strength training is essential for women's health and fitness, but there are many "
            "misconceptions that can hold you back. Learn the truth about building strength and "
            "muscle as a woman..."
        ),
        "excerpt": "Unleash powerful fitness transformations",
        "image": "images/class/crossfit-class.jpg",
        "category": "strength",
        "tags": ["strength training", "women fitness", "muscle building"],
        "published_at": "2023-10-20",
        "read_time": "10 min read",
        "url": "https://www.nerdfitness.com/blog/7-strength-training-myths-every-woman-should-know/",
    },
]


def _matches_text(post: Dict[str, Any], needle: str, include_author: bool = False) -> bool:
    fields = [post["title"], post["content"], post["excerpt"], *post["tags"]]
    if include_author:
        fields.append(post["author"])
    return any(needle in value.lower() for value in fields)


def list_posts(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    author: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = 10,
    page: int = 1,
) -> Dict[str, Any]:
    """Filtered, paginated listing"""
    posts = list(POSTS)
    if category:
        posts = [p for p in posts if p["category"].lower() == category.lower()]
    if tag:
        posts = [p for p in posts if any(tag.lower() in t.lower() for t in p["tags"])]
    if author:
        posts = [p for p in posts if author.lower() in p["author"].lower()]
    if search:
        posts = [p for p in posts if _matches_text(p, search.lower())]

    start = (page - 1) * limit
    items = posts[start:start + limit]
    return {
        "items": items,
        "total": len(posts),
        "pagination": {"page": page, "pages": math.ceil(len(posts) / limit), "limit": limit},
    }


def get_post(post_id: int) -> Optional[Dict[str, Any]]:
    return next((p for p in POSTS if p["id"] == post_id), None)


def categories() -> List[str]:
    return list(dict.fromkeys(p["category"] for p in POSTS))


def tags() -> List[str]:
    return list(dict.fromkeys(t for p in POSTS for t in p["tags"]))


def featured(count: int = 3) -> List[Dict[str, Any]]:
    return POSTS[:count]


def search_posts(query: str) -> List[Dict[str, Any]]:
    """Case-insensitive match on title, content, excerpt, tags and author"""
    needle = query.lower()
    return [p for p in POSTS if _matches_text(p, needle, include_author=True)]


def related_posts(post: Dict[str, Any], limit: int = 3) -> List[Dict[str, Any]]:
    """Posts sharing the category or at least one tag, excluding the post itself"""
    return [
        p for p in POSTS
        if p["id"] != post["id"]
        and (p["category"] == post["category"] or any(t in post["tags"] for t in p["tags"]))
    ][:limit]
