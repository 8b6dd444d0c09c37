from .models import Intent

REPLIES = {
  "task": "I can help you manage your tasks. What would you like to do?",
  "schedule": "I can help you schedule your time blocks. When would you like to work on this?",
  "reminder": "I can set up reminders for you. What would you like to be reminded about?",
  "greeting": "Hello! I'm your AI assistant. How can I help you today?",
  "fallback": "I understand. How can I assist you further?",
}

def normalize_text(raw: str) -> str:
  # 仅做大小写归一，子串匹配不改写空白
  return (raw or "").lower()

def _has_any(text: str, *words: str) -> bool:
  return any(w in text for w in words)

def _has_all(text: str, *words: str) -> bool:
  return all(w in text for w in words)

def detect_intent(message: str) -> Intent:
  """
    顺序即优先级，第一条命中即返回：
    - add + task -> add_task
    - update + task -> update_task
    - schedule / time block -> schedule_time
    - reminder -> set_reminder
    - list + task -> list_tasks
    - 其它 -> general_query
  """
  text = normalize_text(message)
  if _has_all(text, "add", "task"):
    return Intent.ADD_TASK
  if _has_all(text, "update", "task"):
    return Intent.UPDATE_TASK
  if _has_any(text, "schedule", "time block"):
    return Intent.SCHEDULE_TIME
  if "reminder" in text:
    return Intent.SET_REMINDER
  if _has_all(text, "list", "task"):
    return Intent.LIST_TASKS
  return Intent.GENERAL_QUERY

def generate_response(message: str) -> str:
  # 与 detect_intent 各自独立判断，两者结果可能不一致
  text = normalize_text(message)
  if _has_any(text, "task", "todo"):
    return REPLIES["task"]
  if _has_any(text, "schedule", "time"):
    return REPLIES["schedule"]
  if "reminder" in text:
    return REPLIES["reminder"]
  if _has_any(text, "hello", "hi"):
    return REPLIES["greeting"]
  return REPLIES["fallback"]
