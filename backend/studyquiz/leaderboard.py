from typing import Dict, List, Any


def rank_users(users: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort user records by credits, highest first; missing credits count as 0."""
    return sorted(users, key=lambda u: u.get("credits") or 0, reverse=True)


def friends_leaderboard(users: List[Dict[str, Any]], user_id: str) -> List[Dict[str, Any]]:
    by_id = {u["id"]: u for u in users}
    me = by_id.get(user_id)
    if me is None:
        return []
    friend_ids = set(me.get("friends") or [])
    circle = [u for u in users if u["id"] in friend_ids or u["id"] == user_id]
    return rank_users(circle)
