from pydantic import BaseModel

from ..storage.model import ImageHistory


class HistoryEnvelope(BaseModel):
    history: list[ImageHistory]


class HistoryItemEnvelope(BaseModel):
    item: ImageHistory
