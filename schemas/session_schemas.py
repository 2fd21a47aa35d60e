from pydantic import BaseModel
from typing import Literal


class TestamentChoice(BaseModel):
    testament: Literal['old', 'new']
