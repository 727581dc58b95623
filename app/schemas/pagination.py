from pydantic import BaseModel

from app.config import settings


class PaginationParams(BaseModel):
    """
    Raw pagination input as received from the client.
    Out-of-range values are normalized by the pagination engine, not rejected.
    """
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE
