import logging
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from pollu_tracker.controllers.pollution_controller import (
    BasePollutionService,
    Filters,
    Payload,
    normalize_payload,
    parse_filters,
)
from pollu_tracker.core.config import get_settings
from pollu_tracker.core.errors import NotFoundError, TransportError, ValidationError
from pollu_tracker.core.storage import pollution_from_dict
from pollu_tracker.core.timestamps import utc_now_iso
from pollu_tracker.models.pollution_model import Pollution

logger = logging.getLogger(__name__)

_FIELD_MESSAGE = re.compile(r"^(?:Missing|Invalid) field: (?P<field>\w+)$")


class RemotePollutionService(BasePollutionService):
    """
    CRUD service backed by the ``/pollutions`` HTTP resource.

    ``update`` reads the current record and sends the merged result, so a
    partial payload keeps the other fields like the in-process service does.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        super().__init__()
        if client is None:
            url = (base_url or get_settings().api_base_url).rstrip("/")
            client = httpx.Client(base_url=url, timeout=timeout)
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RemotePollutionService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def load(self, filters: Filters = None) -> list[Pollution]:
        criteria = parse_filters(filters)
        with self._state_lock:
            self._last_filters = criteria
            self._refresh()
            return self.visible

    def get_by_id(self, pollution_id: str) -> Pollution:
        response = self._request("GET", f"pollutions/{pollution_id}", pollution_id=pollution_id)
        return self._to_pollution(response.json())

    def create(self, payload: Payload) -> Pollution:
        data = normalize_payload(payload)
        if data.get("recordedAt") is None:
            data["recordedAt"] = utc_now_iso()
        response = self._request("POST", "pollutions", json=data)
        pollution = self._to_pollution(response.json())
        logger.info("Created remote pollution %s", pollution.id)
        self._refresh()
        return pollution

    def update(self, pollution_id: str, payload: Payload) -> Pollution:
        current = self.get_by_id(pollution_id).to_dict()
        current.pop("id")
        changes = {k: v for k, v in normalize_payload(payload).items() if k != "id"}
        if changes.get("recordedAt") is None:
            changes.pop("recordedAt", None)
        response = self._request(
            "PUT",
            f"pollutions/{pollution_id}",
            pollution_id=pollution_id,
            json={**current, **changes},
        )
        pollution = self._to_pollution(response.json())
        logger.info("Updated remote pollution %s", pollution_id)
        self._refresh()
        return pollution

    def delete(self, pollution_id: str) -> None:
        self._request("DELETE", f"pollutions/{pollution_id}", pollution_id=pollution_id)
        logger.info("Deleted remote pollution %s", pollution_id)
        self._refresh()

    def _refresh(self) -> None:
        response = self._request("GET", "pollutions", params=self._last_filters.to_query_params())
        body = response.json()
        if not isinstance(body, list):
            raise TransportError("Expected a JSON array of pollutions")
        items = [self._to_pollution(item) for item in body]
        with self._state_lock:
            self._visible = items

    def _to_pollution(self, item: Any) -> Pollution:
        try:
            return pollution_from_dict(item)
        except (PydanticValidationError, TypeError, ValueError) as exc:
            raise TransportError(f"Malformed pollution in response: {exc}") from exc

    def _request(self, method: str, url: str, pollution_id: str = "", **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code < 400:
            return response

        message = _error_message(response)
        if response.status_code == 404 and pollution_id:
            raise NotFoundError(pollution_id, message)
        if response.status_code == 400:
            match = _FIELD_MESSAGE.match(message)
            raise ValidationError(match.group("field") if match else "body", message)
        logger.error("%s %s returned %s: %s", method, url, response.status_code, message)
        raise TransportError(f"{method} {url} returned {response.status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase
