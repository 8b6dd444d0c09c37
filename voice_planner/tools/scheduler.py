import logging
from datetime import date, datetime, timedelta
from typing import Iterable

import dateparser

from .models import (
  PRIORITY_RANK,
  GeneratedBlock,
  ScheduleWindow,
  TaskStatus,
  WorkItem,
)

BUFFER_MINUTES = 15

logger = logging.getLogger(__name__)

def parse_clock(value: str) -> tuple[int, int]:
  # "HH:MM" 24 小时制 -> (hour, minute)
  parts = (value or "").strip().split(":")
  if len(parts) != 2:
    raise ValueError(f"Expected HH:MM, got {value!r}")
  try:
    hour, minute = int(parts[0]), int(parts[1])
  except ValueError:
    raise ValueError(f"Expected HH:MM, got {value!r}") from None
  if not (0 <= hour <= 23 and 0 <= minute <= 59):
    raise ValueError(f"Time out of range: {value!r}")
  return hour, minute

def parse_day(value: str | date, now: datetime | None = None) -> date:
  """
    ISO 日期直接返回；其它说法（"tomorrow", "next monday"）交给 dateparser。
  """
  if isinstance(value, datetime):
    return value.date()
  if isinstance(value, date):
    return value
  text = (value or "").strip()
  if not text:
    raise ValueError("Date is required")
  try:
    return datetime.strptime(text, "%Y-%m-%d").date()
  except ValueError:
    pass
  ref = now or datetime.now()
  dt = dateparser.parse(text, languages=["en"], settings={
    "PREFER_DATES_FROM": "future",
    "RELATIVE_BASE": ref.replace(tzinfo=None),
  })
  if dt is None:
    raise ValueError(f"Unrecognised date: {value!r}")
  return dt.date()

def build_window(day: date, working_hours_start: str, working_hours_end: str) -> ScheduleWindow:
  sh, sm = parse_clock(working_hours_start)
  eh, em = parse_clock(working_hours_end)
  start = datetime(day.year, day.month, day.day, sh, sm)
  end = datetime(day.year, day.month, day.day, eh, em)
  return ScheduleWindow(day=day, start=start, end=end)

def is_schedulable(item: WorkItem) -> bool:
  return (
    item.status == TaskStatus.PENDING
    and item.estimated_duration is not None
    and item.estimated_duration > 0
  )

def generate_time_blocks(items: Iterable[WorkItem], window: ScheduleWindow) -> list[GeneratedBlock]:
  """
    单趟贪心：按优先级稳定排序，从窗口起点依次排布，块之间留 15 分钟。
    第一个放不下的任务即停止，后面的任务全部丢弃（不跳过、不回溯）。
  """
  eligible = [item for item in items if is_schedulable(item)]
  ordered = sorted(eligible, key=lambda item: -PRIORITY_RANK[item.priority])

  blocks: list[GeneratedBlock] = []
  cursor = window.start
  for item in ordered:
    block_end = cursor + timedelta(minutes=item.estimated_duration)
    if block_end > window.end:
      logger.info(
        "Window %s-%s full at %r, dropping %d remaining item(s)",
        window.start.strftime("%H:%M"),
        window.end.strftime("%H:%M"),
        item.title,
        len(ordered) - len(blocks),
      )
      break
    blocks.append(GeneratedBlock(
      title=item.title,
      start_time=cursor,
      end_time=block_end,
      task_id=item.id,
      is_ai_suggested=True,
    ))
    cursor = block_end + timedelta(minutes=BUFFER_MINUTES)

  return blocks
