"""Project template lookup."""

import json
from datetime import datetime
from typing import Any

from bson import Decimal128, ObjectId, json_util
from bson.json_util import RELAXED_JSON_OPTIONS

from src.commons.infrastructure.documentdb.base import DocumentStoreBase
from src.commons.settings.models import DocumentDBSettings
from src.commons.telemetry import get_logger

_PLAIN_TYPES = (str, int, float, bool, datetime, type(None))


def _json_safe(value: Any) -> Any:
    """Turn BSON values, however deeply nested, into JSON-ready ones.

    ObjectId and Decimal128 become strings. Any other BSON type (Binary,
    Regex, Timestamp, DBRef and so on) becomes its relaxed Extended JSON form.
    """
    if isinstance(value, (ObjectId, Decimal128)):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_json_safe(item) for item in value]
    if isinstance(value, _PLAIN_TYPES):
        return value
    return json.loads(json_util.dumps(value, json_options=RELAXED_JSON_OPTIONS))


class ProjectTemplateService:
    """Serves the project templates stored in the document database."""

    def __init__(
        self,
        document_store: DocumentStoreBase,
        doc_settings: DocumentDBSettings,
    ) -> None:
        """Initialize template service.

        Args:
            document_store: Document store provider.
            doc_settings: Document database configuration.
        """
        self._store = document_store
        self._collection = doc_settings.collections.templates
        self._logger = get_logger(__name__)

    async def list_templates(self) -> list[dict[str, Any]]:
        """Return every template document.

        The MongoDB '_id' is exposed as a string 'id' field.
        """
        documents = await self._store.read_all(self._collection)
        self._logger.debug(
            "Loaded project templates",
            extra={"collection": self._collection, "count": len(documents)},
        )

        templates: list[dict[str, Any]] = []
        for doc in documents:
            template = _json_safe(doc)
            if "_id" in template:
                template["id"] = template.pop("_id")
            templates.append(template)
        return templates
