from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Priority(str, Enum):
  LOW = "low"
  MEDIUM = "medium"
  HIGH = "high"
  URGENT = "urgent"


# 排序权重：数字越大越先排
PRIORITY_RANK = {
  Priority.URGENT: 4,
  Priority.HIGH: 3,
  Priority.MEDIUM: 2,
  Priority.LOW: 1,
}


class TaskStatus(str, Enum):
  PENDING = "pending"
  IN_PROGRESS = "in_progress"
  COMPLETED = "completed"
  CANCELLED = "cancelled"


class Channel(str, Enum):
  TEXT = "text"
  VOICE = "voice"


class Intent(str, Enum):
  ADD_TASK = "add_task"
  UPDATE_TASK = "update_task"
  SCHEDULE_TIME = "schedule_time"
  SET_REMINDER = "set_reminder"
  LIST_TASKS = "list_tasks"
  GENERAL_QUERY = "general_query"


class ReminderType(str, Enum):
  TASK_DUE = "task_due"
  TIME_BLOCK = "time_block"
  CUSTOM = "custom"


@dataclass(frozen=True)
class WorkItem:
  # 调度器读取的任务快照
  id: int
  title: str
  priority: Priority
  status: TaskStatus
  estimated_duration: Optional[int]  # minutes


@dataclass(frozen=True)
class ScheduleWindow:
  # 单日工作时间，半开区间 [start, end)
  day: date
  start: datetime
  end: datetime


@dataclass
class GeneratedBlock:
  title: str
  start_time: datetime
  end_time: datetime
  task_id: int
  is_ai_suggested: bool = True


@dataclass
class ConversationTurn:
  message: str
  response: str
  message_type: Channel
  response_type: Channel
  intent: Optional[Intent]


class User(BaseModel):
  id: int
  email: str
  name: str
  voice_preference: Optional[str] = None
  created_at: datetime
  updated_at: datetime


class Task(BaseModel):
  id: int
  user_id: int
  title: str
  description: Optional[str] = None
  priority: Priority
  status: TaskStatus
  due_date: Optional[datetime] = None
  estimated_duration: Optional[int] = None  # minutes
  actual_duration: Optional[int] = None  # minutes
  tags: list[str] = []
  created_at: datetime
  updated_at: datetime

  def to_work_item(self) -> WorkItem:
    return WorkItem(
      id=self.id,
      title=self.title,
      priority=self.priority,
      status=self.status,
      estimated_duration=self.estimated_duration,
    )


class Conversation(BaseModel):
  id: int
  user_id: int
  message: str
  response: str
  message_type: Channel
  response_type: Channel
  intent: Optional[str] = None
  created_at: datetime


class TimeBlock(BaseModel):
  id: int
  user_id: int
  task_id: Optional[int] = None
  title: str
  start_time: datetime
  end_time: datetime
  is_ai_suggested: bool
  created_at: datetime
  updated_at: datetime


class Reminder(BaseModel):
  id: int
  user_id: int
  task_id: Optional[int] = None
  time_block_id: Optional[int] = None
  message: str
  reminder_time: datetime
  is_sent: bool
  reminder_type: ReminderType
  created_at: datetime
