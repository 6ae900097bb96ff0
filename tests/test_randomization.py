import pytest

from cronsched.clock import UTCClock
from cronsched.cron import Cron
from cronsched.cron_data import InvalidCronExpression
from cronsched.randomization import CronRandomization, RandomizationError

ITERATIONS = 300


def noop(info):
    pass


def check_valid(schedule: str) -> list[str]:
    randomizer = CronRandomization(seed=1234)
    produced = []
    for _ in range(ITERATIONS):
        result = randomizer.parse(schedule)
        cron = Cron(UTCClock())
        cron.add_schedule("validate schedule", result, noop)
        assert len(cron) == 1
        produced.append(result)
    return produced


def check_invalid(schedule: str) -> None:
    randomizer = CronRandomization(seed=1234)
    for _ in range(50):
        with pytest.raises(InvalidCronExpression):
            result = randomizer.parse(schedule)
            Cron(UTCClock()).add_schedule("validate schedule", result, noop)


@pytest.mark.parametrize(
    "schedule",
    [
        "R(0-59) R(0-59) R(0-23) R(1-31) R(1-12) ?",
        "R(45-15) R(30-0) R(18-2) R(28-15) R(8-3) ?",
        "R(0-59) R(0-59) R(0-23) ? R(1-12) R(0-6)",
        "R(45-15) R(30-0) R(18-2) ? R(8-3) R(4-1)",
        "0 0 R(13-20) * * ?",
        "0 0 0 ? * R(0-6)",
        "0 R(45-15) */12 ? * *",
        "0 0 0 ? * R(TUE-FRI)",
        "0 0 0 ? R(JAN-DEC) R(MON-FRI)",
        "0 0 0 ? R(DEC-MAR) R(SAT-SUN)",
        "0 0 0 ? R(JAN-FEB) *",
        "0 0 0 ? R(OCT-OCT) *",
    ],
)
def test_only_valid_schedules_generated(schedule):
    produced = check_valid(schedule)
    assert all("R(" not in result for result in produced)


@pytest.mark.parametrize(
    "schedule",
    [
        "0 0 0 1 R(JAN-DEC) R(MON-SUN)",
        "0 0 0 ? R(JAN) *",
        "0 0 0 ? R(MON-TUE) *",
        "0 0 0 ? * R(JAN-JUN)",
    ],
)
def test_no_schedule_generated(schedule):
    check_invalid(schedule)


def test_random_hour_within_range():
    for result in check_valid("0 0 R(13-20) * * ?"):
        parts = result.split()
        assert parts[:2] == ["0", "0"]
        assert parts[3:] == ["*", "*", "?"]
        assert 13 <= int(parts[2]) <= 20


def test_reverse_range_wraps_around():
    allowed = set(range(45, 60)) | set(range(0, 16))
    for result in check_valid("0 R(45-15) */12 ? * *"):
        assert int(result.split()[1]) in allowed


def test_names_become_numbers():
    for result in check_valid("0 0 0 ? R(DEC-MAR) R(SAT-SUN)"):
        parts = result.split()
        assert int(parts[4]) in {12, 1, 2, 3}
        assert int(parts[5]) in {6, 0}


def test_february_caps_day_of_month():
    for result in check_valid("0 0 0 R(1-31) R(2-2) ?"):
        assert 1 <= int(result.split()[3]) <= 29


def test_thirty_day_month_caps_day_of_month():
    for result in check_valid("0 0 0 R(28-31) R(4-4) ?"):
        assert int(result.split()[3]) in {28, 29, 30}


def test_schedule_without_random_unchanged():
    assert CronRandomization().parse("0 0 12 * * ?") == "0 0 12 * * ?"


def test_same_seed_same_results():
    schedule = "R(0-59) R(0-59) R(0-23) ? R(1-12) R(0-6)"
    first = CronRandomization(seed=7)
    second = CronRandomization(seed=7)
    assert [first.parse(schedule) for _ in range(20)] == [
        second.parse(schedule) for _ in range(20)
    ]


def test_too_few_parts_raises():
    with pytest.raises(RandomizationError):
        CronRandomization().parse("* *")


def test_random_range_out_of_limits_raises():
    with pytest.raises(RandomizationError):
        CronRandomization().parse("R(0-60) * * * * ?")