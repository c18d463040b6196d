# finance/goals.py
# Client-side search, status filter and sorting for the goals page.
# The API returns every goal at once; the page narrows and orders them here.

GOAL_STATUSES = ("all", "active", "completed")            # 🗂️ tabs on the goals page

GOAL_SORT_KEYS = {
    "name": lambda goal: goal.name.lower(),                 # 🔤 case-insensitive
    "targetAmount": lambda goal: goal.target_amount,
    "savedAmount": lambda goal: goal.saved_amount,
    "targetDate": lambda goal: goal.target_date,
    "progress": lambda goal: goal.progress,                 # 🎯 percent saved
}
DEFAULT_SORT_KEY = "targetDate"
DEFAULT_SORT_DIRECTION = "asc"


def filter_goals(goals, search="", status="all"):
    """Case-insensitive match on name or description, then the status tab."""
    needle = (search or "").strip().lower()                 # 🔎 "" matches everything
    result = []
    for goal in goals:
        if needle and needle not in goal.name.lower() and needle not in (goal.description or "").lower():
            continue
        # 🗂️ status tab
        if status == "active" and goal.is_completed:
            continue
        if status == "completed" and not goal.is_completed:
            continue
        result.append(goal)                                 # ✅ keep it
    return result


def sort_goals(goals, key=DEFAULT_SORT_KEY, direction=DEFAULT_SORT_DIRECTION):
    """Order goals by one of GOAL_SORT_KEYS; unknown keys fall back to targetDate."""
    sort_key = GOAL_SORT_KEYS.get(key, GOAL_SORT_KEYS[DEFAULT_SORT_KEY])
    return sorted(goals, key=sort_key, reverse=(direction == "desc"))   # ↕️ stable for ties
