"""Internal constants shared across the package."""

USER_AGENT = "traffic-replay/0.1"

#: VATSIM status document listing the current datafeed endpoints.
STATUS_URL = "https://status.vatsim.net/status.json"

NM_TO_METERS: float = 1852.0

#: Default relevance radius around each scope airport, in nautical miles.
CAPTURE_RANGE_NM: float = 600.0

#: Minutes captured before the advertised start and after the advertised end.
EVENT_PRE_TIME_MINUTES: int = 5
EVENT_POST_TIME_MINUTES: int = 5

#: Bounded hand-off between the poller and the consumer.
CHANNEL_CAPACITY: int = 32

# ------------------------------------------------------------------
# Poll pacing (seconds)
# ------------------------------------------------------------------

POLL_INTERVAL: float = 5.0
MAX_POLL_DELAY_CREDIT: float = 4.0
RETRY_DELAY: float = 1.0

CAPTURES_DIRNAME = "captures"
CAPTURE_SUFFIX = ".json"
EVENTS_INDEX_FILENAME = "events.json"
