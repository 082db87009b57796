"""
Prometheus metric definitions
"""

from prometheus_client import Counter, Gauge, Histogram, Info


class PassResult:
    FORMED = "formed"
    NO_ACTION = "no action"
    ERRORED = "errored"


info = Info("build", "Information collected on server start")

# ==========
# Matchmaker
# ==========
matchmaker_passes = Counter(
    "lobby_matchmaker_passes_total",
    "Number of matchmaking passes run",
    ["lobby", "result"]
)

pass_duration = Histogram(
    "lobby_matchmaker_pass_duration_seconds",
    "Time spent in a single matchmaking pass in seconds",
    ["lobby", "status"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5],
)

room_size = Histogram(
    "lobby_matchmaker_room_size",
    "Number of users in formed rooms",
    ["lobby"],
    buckets=[1, 2, 3, 4, 5, 6, 8, 10, 12, 16, 20],
)

room_happiness = Histogram(
    "lobby_matchmaker_room_happiness",
    "Average happiness of evaluated candidate rooms",
    ["lobby"],
    buckets=[25, 50, 100, 150, 200, 250, 300, 400, 500, 1000],
)

waiting_users = Gauge(
    "lobby_matchmaker_waiting_users",
    "Users in the waiting pool at pass time",
    ["lobby"],
)

skipped_users = Counter(
    "lobby_matchmaker_skipped_users_total",
    "Waiting users ignored because their record was malformed",
    ["lobby"],
)

pass_timer = Gauge(
    "lobby_matchmaker_pass_timer_seconds",
    "Time until the next matchmaking pass in seconds",
    ["lobby"],
)

db_exceptions = Counter(
    "db_exceptions_total",
    "Total number of database exceptions when executing queries",
    ["class", "code"]
)
