import logging
from typing import Dict, List

import httpx

from app.settings import settings
from domain.errors import ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)

SITE = "stackoverflow"


def summarize_stackoverflow(user: Dict, answers: List[Dict], questions: List[Dict],
                            tags: List[Dict]) -> Dict:
    badges = user.get("badge_counts") or {}
    return {
        "profile": {
            "displayName": user.get("display_name"),
            "reputation": user.get("reputation"),
            "location": user.get("location"),
            "aboutMe": user.get("about_me"),
            "websiteUrl": user.get("website_url"),
            "profileImage": user.get("profile_image"),
            "badges": {
                "gold": badges.get("gold", 0),
                "silver": badges.get("silver", 0),
                "bronze": badges.get("bronze", 0),
            },
            "createdAt": user.get("creation_date"),
        },
        "stats": {
            "reputation": user.get("reputation"),
            "questionCount": user.get("question_count"),
            "answerCount": user.get("answer_count"),
            "upVotes": user.get("up_vote_count"),
            "downVotes": user.get("down_vote_count"),
        },
        "topAnswers": [{
            "score": a.get("score"),
            "isAccepted": a.get("is_accepted"),
            "questionId": a.get("question_id"),
            "answerUrl": f"https://stackoverflow.com/a/{a.get('answer_id')}",
        } for a in answers[:5]],
        "topQuestions": [{
            "title": q.get("title"),
            "score": q.get("score"),
            "answerCount": q.get("answer_count"),
            "viewCount": q.get("view_count"),
            "questionUrl": f"https://stackoverflow.com/q/{q.get('question_id')}",
        } for q in questions[:5]],
        "topTags": [{"name": t.get("tag_name"), "count": t.get("count")} for t in tags[:10]],
    }


async def _items(client: httpx.AsyncClient, url: str, params: Dict) -> List[Dict]:
    r = await client.get(url, params=params)
    if r.status_code != 200:
        logger.warning("StackExchange lookup %s returned %s", url, r.status_code)
        return []
    return r.json().get("items") or []


async def fetch_stackoverflow_footprint(user_id: str, client: httpx.AsyncClient | None = None) -> Dict:
    base = f"{settings.STACKEXCHANGE_API_URL.rstrip('/')}/users/{user_id}"
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=20)
    try:
        r = await client.get(base, params={"order": "desc", "sort": "reputation", "site": SITE})
        if r.status_code != 200:
            raise ExternalServiceError(f"StackOverflow API error: {r.status_code}")
        users = r.json().get("items") or []
        if not users:
            raise NotFoundError("User not found")
        answers = await _items(client, f"{base}/answers", {
            "order": "desc", "sort": "votes", "site": SITE, "pagesize": 5, "filter": "withbody"})
        questions = await _items(client, f"{base}/questions", {
            "order": "desc", "sort": "votes", "site": SITE, "pagesize": 5})
        tags = await _items(client, f"{base}/top-tags", {"pagesize": 10, "site": SITE})
    except httpx.RequestError as exc:
        raise ExternalServiceError(f"StackOverflow API unreachable: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()
    return summarize_stackoverflow(users[0], answers, questions, tags)
