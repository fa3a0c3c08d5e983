"""
RelayHub Platform - Dashboard Poll Client

Python counterpart of static/relay/dashboard.js. It polls a device's
latest snapshot on a fixed interval and classifies it:

    online               snapshot younger than the freshness threshold
    stale                snapshot older than the threshold
    no-data              device registered but nothing received yet
    must-reauthenticate  the session is gone (HTTP 401); polling goes on
    error                transport failure, 404/5xx or a non-JSON answer

At most one poll request is in flight per client; a tick that fires
while one is pending is skipped. Commands are fire-and-forget.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

import logging
import threading
import time
from urllib.parse import quote

import requests

from .freshness import FRESH, FRESHNESS_THRESHOLD_MS, NO_DATA, classify_freshness, snapshot_age_ms

logger = logging.getLogger(__name__)

ONLINE = "online"
STALE = "stale"
MUST_REAUTH = "must-reauthenticate"
ERROR = "error"

# Fields the dashboard renders; anything else in a snapshot is passed through
DISPLAY_FIELDS = ("door", "led", "distance_cm", "pir", "ldr", "night", "t_left_ms", "serverTs")

COMMANDS = ("OPEN", "CLOSE", "LED_ON", "LED_OFF")


class PollResult:
    def __init__(self, status, snapshot=None, age_ms=None):
        self.status = status
        self.snapshot = snapshot
        self.age_ms = age_ms

    def __repr__(self):
        return f"PollResult(status={self.status!r}, age_ms={self.age_ms!r})"

    def fields(self):
        """The display fields of the snapshot, None where missing."""
        snapshot = self.snapshot or {}
        return {name: snapshot.get(name) for name in DISPLAY_FIELDS}


class RelayPoller:
    """
    Poll loop for one device on one relay server.

    session defaults to a new requests.Session; anything with the same
    get/post/cookies surface works, which is how the tests drive it.
    """

    def __init__(
        self,
        base_url: str,
        device_id: str,
        session=None,
        interval: float = 1.0,
        freshness_ms: int = FRESHNESS_THRESHOLD_MS,
        timeout: float = 5.0,
        clock=time.time,
        sleep=time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.device_id = device_id
        self.session = session if session is not None else requests.Session()
        self.interval = interval
        self.freshness_ms = freshness_ms
        self.timeout = timeout
        self.clock = clock
        self.sleep = sleep
        self.last_result = None
        self._in_flight = threading.Lock()

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @property
    def telemetry_url(self) -> str:
        return self._url(f"/api/telemetry/{quote(self.device_id, safe='')}")

    @property
    def command_url(self) -> str:
        return self._url(f"/api/cmd/{quote(self.device_id, safe='')}")

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> bool:
        """Open a dashboard session. Returns False on bad credentials."""
        resp = self.session.post(
            self._url("/api/auth/login/"),
            json={"username": username, "password": password},
            timeout=self.timeout,
        )
        if resp.status_code == 200:
            return True
        logger.warning("Login as %s failed with HTTP %s", username, resp.status_code)
        return False

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll_once(self):
        """
        Fetch and classify the latest snapshot.

        Returns None without issuing a request if a previous poll is
        still in flight.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Poll for %s skipped, previous request still pending", self.device_id)
            return None
        try:
            result = self._fetch()
        finally:
            self._in_flight.release()

        self.last_result = result
        return result

    def _fetch(self):
        try:
            resp = self.session.get(self.telemetry_url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Poll for %s failed: %s", self.device_id, exc)
            return PollResult(ERROR)

        if resp.status_code == 401:
            return PollResult(MUST_REAUTH)
        if resp.status_code != 200:
            logger.warning("Poll for %s answered HTTP %s", self.device_id, resp.status_code)
            return PollResult(ERROR)

        try:
            snapshot = resp.json()
        except ValueError:
            return PollResult(ERROR)

        if not snapshot:
            return PollResult(NO_DATA)
        if not isinstance(snapshot, dict):
            return PollResult(ERROR)

        now_ms = int(self.clock() * 1000)
        freshness = classify_freshness(snapshot, now_ms, self.freshness_ms)
        status = ONLINE if freshness == FRESH else STALE
        return PollResult(status, snapshot, snapshot_age_ms(snapshot, now_ms))

    def run(self, ticks=None, on_result=None):
        """
        Poll every interval seconds until ticks polls have been made
        (forever when ticks is None). Ticks missed because a request ran
        long are dropped rather than fired back to back.
        """
        done = 0
        next_tick = self.clock()
        while ticks is None or done < ticks:
            delay = next_tick - self.clock()
            if delay > 0:
                self.sleep(delay)

            result = self.poll_once()
            done += 1
            if result is not None and on_result is not None:
                on_result(result)

            next_tick += self.interval
            now = self.clock()
            if now > next_tick:
                missed = int((now - next_tick) // self.interval) + 1
                next_tick += missed * self.interval

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def send_cmd(self, cmd: str) -> bool:
        """
        Queue cmd for the device. True only means the server stored it;
        there is no confirmation from the device.
        """
        headers = {"Referer": self.base_url + "/"}
        csrf_token = self.session.cookies.get("csrftoken")
        if csrf_token:
            headers["X-CSRFToken"] = csrf_token

        try:
            resp = self.session.post(
                self.command_url,
                json={"cmd": cmd},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Sending %s to %s failed: %s", cmd, self.device_id, exc)
            return False

        if resp.status_code != 200:
            logger.warning(
                "Sending %s to %s answered HTTP %s", cmd, self.device_id, resp.status_code
            )
            return False
        return True
