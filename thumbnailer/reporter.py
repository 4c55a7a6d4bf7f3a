"""
Reports video durations to the gallery API.

Two calls:
  1. POST {endpoint}auth                          {username, password} -> {token}
  2. POST {endpoint}gallery/update_video_duration {original, duration}
     with "Authorization: Bearer <token>"

Reporting is best effort: every failure is logged and swallowed so the
thumbnail job's outcome never depends on the gallery being reachable.
"""
from __future__ import annotations

import logging

import requests

from thumbnailer.constants import AUTH_ROUTE, UPDATE_DURATION_ROUTE

logger = logging.getLogger(__name__)


class StatusReporter:
    def __init__(self, session: requests.Session | None = None, timeout: float = 10.0) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def report(
        self,
        asset_name: str,
        duration_secs: int,
        endpoint: str,
        username: str,
        password: str,
    ) -> None:
        if not endpoint:
            logger.warning("No gallery API configured; duration for %s not reported", asset_name)
            return
        base = endpoint if endpoint.endswith("/") else endpoint + "/"

        token = self._authenticate(base, username, password)
        if token is None:
            return

        try:
            resp = self._session.post(
                base + UPDATE_DURATION_ROUTE,
                json={"original": asset_name, "duration": duration_secs},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Duration update failed for %s: %s", asset_name, exc)
            return

        if resp.status_code != 200:
            logger.error(
                "Duration update for %s rejected: HTTP %d %s",
                asset_name, resp.status_code, resp.text[:500],
            )
            return
        logger.info("Reported duration %ds for %s", duration_secs, asset_name)

    def _authenticate(self, base: str, username: str, password: str) -> str | None:
        try:
            resp = self._session.post(
                base + AUTH_ROUTE,
                json={"username": username, "password": password},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Gallery API auth failed: %s", exc)
            return None

        if resp.status_code != 200:
            logger.error("Gallery API auth rejected: HTTP %d", resp.status_code)
            return None

        try:
            token = resp.json().get("token")
        except (ValueError, AttributeError) as exc:
            logger.error("Gallery API auth returned an unreadable body: %s", exc)
            return None
        if not token:
            logger.error("Gallery API auth response carried no token")
            return None
        return token
