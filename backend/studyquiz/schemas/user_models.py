from pydantic import BaseModel
from typing import Optional, List


class UserProfileIn(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    credits: Optional[int] = None
    friends: Optional[List[str]] = None

class UserProfileOut(BaseModel):
    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    credits: int = 0
    friends: List[str] = []

class LeaderboardOut(BaseModel):
    all_users: List[UserProfileOut]
    friends: List[UserProfileOut]
