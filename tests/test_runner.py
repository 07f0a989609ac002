import pytest

from pom_kit.core.controller.runner import Retrier, is_transient
from pom_kit.core.errors import (
    DriverError,
    ElementNotReady,
    NavigationError,
    NavigationFailure,
    NotNavigated,
    WaitError,
)


class Flaky:
    def __init__(self, failures: list[Exception]) -> None:
        self.failures = list(failures)
        self.calls = 0

    async def __call__(self, value: str) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return value


def test_transient_classification() -> None:
    assert is_transient(ElementNotReady("#a", 0.1))
    assert is_transient(WaitError("slow"))
    assert is_transient(NavigationError(NavigationFailure.TIMEOUT, "slow", url="http://x"))
    assert not is_transient(
        NavigationError(NavigationFailure.DRIVER_FAILURE, "down", url="http://x")
    )
    assert not is_transient(DriverError("down"))
    assert not is_transient(NotNavigated("login", "authenticate"))


@pytest.mark.asyncio
async def test_retries_until_success() -> None:
    step = Flaky([ElementNotReady("#a", 0.1), WaitError("slow")])
    retrier = Retrier(retries=2, backoff_s=0)

    assert await retrier.run(step, "ok") == "ok"
    assert step.calls == 3
    assert [a.index for a in retrier.attempts] == [1, 2]


@pytest.mark.asyncio
async def test_gives_up_after_budget() -> None:
    step = Flaky([ElementNotReady("#a", 0.1)] * 3)
    with pytest.raises(ElementNotReady):
        await Retrier(retries=1, backoff_s=0).run(step, "ok")
    assert step.calls == 2


@pytest.mark.asyncio
async def test_contract_violations_are_not_retried() -> None:
    step = Flaky([NotNavigated("login", "authenticate")])
    with pytest.raises(NotNavigated):
        await Retrier(retries=5, backoff_s=0).run(step, "ok")
    assert step.calls == 1


@pytest.mark.asyncio
async def test_negative_retries_clamped() -> None:
    step = Flaky([WaitError("slow")])
    with pytest.raises(WaitError):
        await Retrier(retries=-3, backoff_s=0).run(step, "ok")
    assert step.calls == 1
