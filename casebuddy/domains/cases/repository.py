"""Repository for case questions."""

import logging
from typing import List

from pymongo.errors import PyMongoError

from ...schemas.cases import Case, CaseBase, CaseDocument
from ...utils.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def _to_case(document: CaseDocument) -> Case:
    return Case(id=str(document.id), **document.model_dump(include=set(CaseBase.model_fields)))


class CaseRepository:
    """Read access to the case catalogue."""

    async def list_active(self) -> List[Case]:
        """Get every active case, oldest first."""
        try:
            documents = await CaseDocument.find(CaseDocument.is_active == True).sort("date_posted").to_list()  # noqa: E712
        except PyMongoError as e:
            raise StoreUnavailableError("case listing", str(e)) from e
        return [_to_case(document) for document in documents]
