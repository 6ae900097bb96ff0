# cronsched

Cron expressions with second resolution, and a small scheduler that runs
Python callables when their schedule comes due. No threads are started: you
call `tick()` at least once a second and due tasks run on the spot.

## Installing

```
pip install .
```

The package has no dependencies outside the standard library. The tests use
pytest (`pip install .[test]`).

## Expressions

An expression has six fields, separated by white space:

```
seconds  minutes  hours  day-of-month  month  day-of-week
0-59     0-59     0-23   1-31          1-12   0-6 (Sunday = 0)
```

Each field accepts:

- `*` for every value, or `?` to ignore the field (one of day-of-month and
  day-of-week must be `?` unless exactly one of them is `*`);
- a single number, `5`;
- a range, `1-5`, which may wrap around: `22-1` in the hours field means
  22, 23, 0 and 1;
- a step, `*/15` or `3/10`;
- a comma-separated list of the above, `0,12` or `JAN-MAR,DEC`.

Months take the names `JAN` to `DEC` and days of week `SUN` to `SAT`, in any
case. `@yearly`, `@annually`, `@monthly`, `@weekly`, `@daily` and `@hourly`
are accepted as shorthands.

Date combinations that can never happen, such as `0 0 * 30 FEB ?` or
`0 0 * 31 APR ?`, are rejected when parsing.

`CronData.parse` parses an expression and raises `InvalidCronExpression` (a
`ValueError`) if it is wrong; `CronData.create` does the same but reuses the
result for text it has already parsed. The result holds one frozen set of
allowed values per field: `seconds`, `minutes`, `hours`, `day_of_month`,
`months` and `day_of_week`.

```python
from cronsched.cron_data import CronData, InvalidCronExpression

data = CronData.create("0 0 12 ? * MON-FRI")
sorted(data.day_of_week)       # [1, 2, 3, 4, 5]

try:
    CronData.parse("* * 25 * * ?")
except InvalidCronExpression as exc:
    print(exc)
```

The helpers `parse_range(text, field)`, `replace_names_with_numbers(text,
field)` and `has_any_in_range(values, low, high)` in `cronsched.cron_data`
work on single parts of a field; `cronsched.time_types.Field` names the six
fields and knows their limits (`first`, `last`, `contains`).

## Next run time

```python
from datetime import datetime
from cronsched.cron_data import CronData
from cronsched.cron_schedule import CronSchedule

schedule = CronSchedule(CronData.create("0 0 10 ? FEB 1"))
schedule.calculate_from(datetime(2017, 12, 31, 23, 59, 58))
# datetime(2018, 2, 5, 10, 0)
```

`calculate_from` returns the first allowed time at or after the given one,
with fractions of a second dropped. It raises `ScheduleError` when no
matching time is found within its search limit. `to_calendar_time` splits a
datetime into a `DateTime` of year, month, day, hour, minute and second.

## Scheduling tasks

```python
import time
from cronsched.cron import Cron
from cronsched.clock import UTCClock

cron = Cron(clock=UTCClock())

def report(info):
    print(info.name, "ran", info.delay, "late")

cron.add_schedule("every-15-seconds", "*/15 * * * * ?", report)

while True:
    cron.tick()
    time.sleep(0.5)
```

`add_schedule` raises `InvalidCronExpression` for an invalid expression.
Several schedules sharing one callable can be added at once with
`add_schedules({"name": "expression", ...}, work)`; nothing is added unless
every expression is valid. `remove_schedule(name)` and `clear_schedules()`
remove tasks, `len(cron)` counts them, `time_until_next()` tells how long until
the next one is due (`timedelta.max` when there are none),
`time_until_expiry_for_tasks()` lists each task's name with its time left,
`recalculate_schedule()` works out every next run again from the current
time, and `str(cron)` gives one status line per task. `tick()` returns how
many tasks ran; it may also be given the time to use, `tick(now)`.

The scheduler follows the usual cron rules for clock changes: a jump of three
hours or more, either way, reschedules every task from the new time; smaller
jumps back do not make a task run twice, and after smaller jumps forward a
task whose time has passed runs on the next tick. Several ticks within the
same second count as one.

`LocalClock` (the default) works in local wall-clock time, `UTCClock` in UTC;
subclass `CronClock` (implementing `now` and `utc_offset`) to drive the
scheduler from your own time source. Pass `thread_safe=True` to `Cron` when
tasks are added or removed from other threads.

The `Task` and `TaskQueue` classes in `cronsched.task` are what the scheduler
is built from and can be used on their own.

## Randomised schedules

`CronRandomization` turns `R(low-high)` fields into a random value from that
range, so many machines sharing one configuration do not all fire at once:

```python
from cronsched.randomization import CronRandomization

randomizer = CronRandomization(seed=42)
expression = randomizer.parse("0 R(0-59) R(13-20) ? * R(MON-FRI)")
```

Ranges may wrap around and may use month or day names. Day-of-month ranges
are narrowed to days that exist in the chosen months. An expression whose
random parts cannot be resolved raises `RandomizationError` (an
`InvalidCronExpression`). The returned expression is not checked as a whole,
so pass it to `CronData.parse` or `Cron.add_schedule` to validate it.

## What it does not do

There is no command-line tool, daemon or crontab file reader: the package is
a library, and the scheduler only runs tasks when your own code calls
`tick()`. Schedules are held in memory and are not stored anywhere.