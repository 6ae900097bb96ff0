from datetime import datetime, timedelta

import pytest

from cronsched.cron_data import CronData
from cronsched.cron_schedule import CronSchedule
from cronsched.task import Task, TaskInformation, TaskQueue


def make_task(name="A task", expression="* * * * * ?", work=None):
    return Task(name, CronSchedule(CronData.create(expression)), work or (lambda info: None))


def impossible_schedule():
    data = CronData(
        seconds=frozenset({0}),
        minutes=frozenset({0}),
        hours=frozenset({0}),
        day_of_month=frozenset({30}),
        months=frozenset({2}),
        day_of_week=frozenset(range(7)),
    )
    return CronSchedule(data)


START = datetime(2018, 3, 1, 12, 13, 45)


def test_task_information_is_abstract():
    with pytest.raises(TypeError):
        TaskInformation()


def test_new_task_is_not_expired():
    task = make_task()
    assert task.is_expired(START) is False
    assert task.delay == -timedelta(seconds=1)


def test_calculate_next_sets_next_schedule():
    task = make_task()
    assert task.calculate_next(START) is True
    assert task.next_schedule == START
    assert task.is_expired(START) is True


def test_not_expired_before_next_schedule():
    task = make_task()
    task.calculate_next(START)
    assert task.is_expired(START - timedelta(seconds=2)) is False


def test_time_until_expiry_never_negative():
    task = make_task()
    task.calculate_next(START)
    assert task.time_until_expiry(START + timedelta(hours=1)) == timedelta(0)
    assert task.time_until_expiry(START - timedelta(seconds=3)) == timedelta(seconds=3)


def test_execute_calls_work_with_delay():
    seen = []
    task = make_task(work=lambda info: seen.append((info.name, info.delay)))
    task.calculate_next(START)
    task.execute(START + timedelta(seconds=2))
    assert seen == [("A task", timedelta(seconds=2))]


def test_not_expired_again_after_running_in_the_past():
    task = make_task()
    task.calculate_next(START)
    task.execute(START)
    assert task.is_expired(START - timedelta(seconds=1)) is False


def test_calculate_next_fails_for_impossible_schedule():
    task = Task("never", impossible_schedule(), lambda info: None)
    assert task.calculate_next(datetime(2021, 1, 1)) is False
    assert task.valid is False
    assert task.is_expired(datetime(2021, 1, 1)) is False


def test_status_format():
    task = make_task("A")
    task.calculate_next(START)
    assert task.status(START) == "'A' expires in 0ms => 2018-3-1 12:13:45"


def test_tasks_compare_by_next_schedule():
    early = make_task("early")
    late = make_task("late")
    early.calculate_next(START)
    late.calculate_next(START + timedelta(minutes=1))
    assert early < late
    assert late > early


def test_queue_sort_and_top():
    queue = TaskQueue()
    late = make_task("late")
    late.calculate_next(START + timedelta(minutes=5))
    early = make_task("early")
    early.calculate_next(START)
    queue.push(late)
    queue.push(early)
    queue.sort()
    assert queue.top().name == "early"
    assert [t.name for t in queue] == ["early", "late"]


def test_queue_top_of_empty_raises():
    with pytest.raises(IndexError):
        TaskQueue().top()


def test_queue_extend_and_clear():
    queue = TaskQueue()
    queue.extend([make_task(f"Task-{i}") for i in range(1, 6)])
    assert len(queue) == 5
    queue.clear()
    assert len(queue) == 0


def test_queue_remove_by_name():
    queue = TaskQueue()
    queue.extend([make_task(f"Task-{i}") for i in range(1, 6)])
    queue.remove("Task-6")
    assert len(queue) == 5
    queue.remove("Task-5")
    assert len(queue) == 4
    assert "Task-5" not in [t.name for t in queue]


def test_thread_safe_queue_lock_is_reentrant():
    queue = TaskQueue(thread_safe=True)
    queue.push(make_task("one"))
    with queue.locked() as held:
        held.remove("one")
        assert len(held) == 0
        with queue.locked():
            held.push(make_task("two"))
    assert [t.name for t in queue] == ["two"]