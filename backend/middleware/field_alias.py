"""
Field Alias Middleware
Rewrites alternate request field names to their canonical names before
request validation runs (e.g. "frequency" -> "couponFrequency").
"""
import json
import logging
from typing import Dict, Optional

from config import FIELD_ALIASES

logger = logging.getLogger(__name__)

# Methods whose JSON body is rewritten
BODY_METHODS = {"POST", "PUT", "PATCH"}


def apply_field_aliases(payload: dict, aliases: Optional[Dict[str, str]] = None) -> dict:
    """
    Return a copy of payload with alias keys moved to their canonical keys.

    The alias value is used only when the canonical key is absent; when both
    are present the canonical value wins and the alias is dropped.
    """
    aliases = FIELD_ALIASES if aliases is None else aliases
    result = dict(payload)
    for alias, canonical in aliases.items():
        if alias not in result:
            continue
        value = result.pop(alias)
        if canonical in result:
            logger.info(f"[FieldAlias] Ignoring {alias} ({value}), {canonical} already present")
        else:
            logger.info(f"[FieldAlias] Mapping {alias} ({value}) to {canonical}")
            result[canonical] = value
    return result


class FieldAliasMiddleware:
    """
    ASGI middleware that replays a rewritten JSON body to the application.

    Bodies that are not JSON objects are passed through untouched so request
    validation can report them.
    """
    def __init__(self, app, aliases: Optional[Dict[str, str]] = None):
        self.app = app
        self.aliases = FIELD_ALIASES if aliases is None else aliases

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or scope["method"] not in BODY_METHODS:
            await self.app(scope, receive, send)
            return

        body = b""
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # Client disconnected before the body arrived
                return
            body += message.get("body", b"")
            more_body = message.get("more_body", False)

        body = self._rewrite(body)
        body_sent = False

        async def replay_receive():
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay_receive, send)

    def _rewrite(self, body: bytes) -> bytes:
        if not body:
            return body
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return body
        if not isinstance(payload, dict) or not any(alias in payload for alias in self.aliases):
            return body

        logger.debug(f"[FieldAlias] Before: {payload}")
        payload = apply_field_aliases(payload, self.aliases)
        logger.debug(f"[FieldAlias] After: {payload}")
        return json.dumps(payload).encode("utf-8")
