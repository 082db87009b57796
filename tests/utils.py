import asyncio

# Fixed point in time used as "now" by tests that need exact boredom values
NOW = 1_600_000_000.0


class FrozenClock:
    """
    A clock that only moves when told to. Pass it as the `clock` of a
    `MatchmakingPass` to get reproducible wait times.
    """

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def wait_for_condition(predicate, timeout=1, interval=0.01):
    """
    Poll `predicate` until it returns something truthy or `timeout` seconds
    have passed.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise asyncio.TimeoutError("Condition was never met")
        await asyncio.sleep(interval)
