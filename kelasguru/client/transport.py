"""
kelasguru.client.transport — Form-POST Transport to the Apps Script Backend
=============================================================================

Every backend call is one POST of a flat form body whose first field is
``action``.  The backend answers with ``{"success": bool, "data": ...,
"error": ...}``; anything else it sends (pagination fields) rides along in
:attr:`ApiResult.extra`.

Failures never raise out of :meth:`ApiTransport.request`.  Network errors,
non-2xx statuses and unparseable bodies all come back as
``ApiResult(success=False, error=...)``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

__all__ = ["ApiResult", "ApiTransport", "encode_form"]

DEFAULT_ERROR = "An error occurred while communicating with the server"

# Param values never written to the log
_REDACTED_KEYS: frozenset[str] = frozenset({"password"})


# ---------------------------------------------------------------------------
# ApiResult: the uniform result envelope
# ---------------------------------------------------------------------------
@dataclass
class ApiResult:
    """Outcome of one backend call.

    ``data`` is authoritative only when ``success`` is true; otherwise
    ``error`` carries the diagnostic.  ``unreachable`` separates transport
    failures from a backend that answered ``success: false``.
    """

    success: bool
    data: Any = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    # Backend never gave a usable answer (network, HTTP status, body shape)
    unreachable: bool = False

    @classmethod
    def ok(cls, data: Any = None, **extra: Any) -> ApiResult:
        return cls(success=True, data=data, extra=extra)

    @classmethod
    def fail(cls, error: str | None = None, *, unreachable: bool = False) -> ApiResult:
        return cls(success=False, error=error or DEFAULT_ERROR, unreachable=unreachable)

    @classmethod
    def from_payload(cls, payload: Any) -> ApiResult:
        """Wrap a decoded backend JSON body."""
        if not isinstance(payload, Mapping):
            return cls.fail(
                f"Unexpected response from server: expected an object, "
                f"got {type(payload).__name__}",
                unreachable=True,
            )
        extra = {
            k: v for k, v in payload.items() if k not in ("success", "data", "error")
        }
        success = bool(payload.get("success"))
        return cls(
            success=success,
            data=payload.get("data"),
            error=payload.get("error") or (None if success else DEFAULT_ERROR),
            extra=extra,
        )

    def rows(self) -> list[Mapping[str, Any]]:
        """``data`` as a list of row objects; anything else yields []."""
        if not isinstance(self.data, list):
            return []
        return [row for row in self.data if isinstance(row, Mapping)]

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to the wire shape the dashboard expects."""
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None or self.success:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out


# ---------------------------------------------------------------------------
# Form encoding
# ---------------------------------------------------------------------------
def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_form(action: str, params: Mapping[str, Any] | None = None) -> dict[str, str]:
    """Flatten *action* + *params* into an ordered form body, ``action`` first."""
    form: dict[str, str] = {"action": action}
    for key, value in (params or {}).items():
        if key == "action":
            continue
        form[str(key)] = _to_text(value)
    return form


def _loggable(form: Mapping[str, str]) -> dict[str, str]:
    return {k: ("***" if k in _REDACTED_KEYS else v) for k, v in form.items()}


# ---------------------------------------------------------------------------
# ApiTransport
# ---------------------------------------------------------------------------
class ApiTransport:
    """One backend endpoint reached through a shared ``httpx.AsyncClient``.

    Usage::

        async with ApiTransport(cfg.teacher_api_url) as api:
            result = await api.request("getKelas")
            if result.success:
                ...

    Parameters
    ----------
    url : str
        The Apps Script ``/exec`` URL.
    transport : httpx.AsyncBaseTransport, optional
        Injected transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        # Apps Script answers /exec with a redirect to the script output.
        self._client = httpx.AsyncClient(transport=transport, follow_redirects=True)

    async def request(
        self, action: str, params: Mapping[str, Any] | None = None
    ) -> ApiResult:
        """POST *action* with *params* and return the decoded result."""
        form = encode_form(action, params)
        logger.debug("API call %s → %s", action, _loggable(form))

        try:
            response = await self._client.post(self.url, data=form)
            if not response.is_success:
                return self._failed(action, f"HTTP error! status: {response.status_code}")
            payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return self._failed(action, str(exc))
        except ValueError as exc:
            # json.JSONDecodeError and UnicodeDecodeError both land here
            return self._failed(action, f"Invalid JSON response: {exc}")

        result = ApiResult.from_payload(payload)
        if not result.success:
            logger.info("API %s returned failure: %s", action, result.error)
        return result

    def _failed(self, action: str, message: str) -> ApiResult:
        logger.warning("API call %s failed: %s", action, message or DEFAULT_ERROR)
        return ApiResult.fail(message, unreachable=True)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
