from pydantic import BaseModel, Field
from typing import Literal


class SubscriberCreate(BaseModel):
    destination: str = Field(..., min_length=1, max_length=64)


class MembershipEvent(SubscriberCreate):
    # Telegram chat member statuses
    status: Literal['member', 'administrator', 'left', 'kicked', 'restricted', 'creator']
