"""Achievement and task bookkeeping, re-evaluated after every status mutation."""
import logging

from constants import ACHIEVEMENTS, ITEMS, STAT_NAMES, TASKS
from errors import ValidationFailure

logger = logging.getLogger(__name__)


def stat_value(status, stat):
    if stat == 'level':
        return status.level
    if stat == 'exp':
        return status.exp
    if stat in STAT_NAMES:
        return getattr(status, stat)
    raise ValidationFailure(f"unknown stat {stat!r}")


def grant_reward(status, inventory, reward, source):
    """Apply an exp/items/unlocks reward and return the notification lines."""
    messages = []
    exp = reward.get('exp', 0)
    status.exp += exp
    for item_id in reward.get('items', []):
        if inventory.add_item(item_id, 1):
            messages.append(f"Got item: {ITEMS[item_id]['name']}")
    for unlock in reward.get('unlocks', []):
        status.unlocks.add(unlock)
        messages.append(f"Unlocked: {unlock}")
    idle = reward.get('idle_animation')
    if idle:
        status.unlocked_idle_animations.add(idle)
        messages.append(f"New idle animation: {idle}")
    logger.info("%s rewarded %d exp", source, exp)
    return messages


class AchievementTracker:
    def __init__(self, inventory, table=None):
        self.inventory = inventory
        self.table = ACHIEVEMENTS if table is None else table

    def condition_met(self, status, condition):
        kind = condition.get('type')
        if kind == 'interaction_count':
            return status.count(condition['interaction']) >= condition['count']
        if kind == 'status_threshold':
            stat = condition['stat']
            # Compared against the cap as it stands now, which grows with level.
            target = status.cap(stat) if condition.get('at_cap') else condition['threshold']
            return stat_value(status, stat) >= target
        if kind == 'level_reached':
            return status.level >= condition['level']
        if kind == 'task_completed':
            return condition['task'] in status.completed_tasks
        raise ValidationFailure(f"unknown achievement condition {kind!r}")

    def evaluate(self, status):
        messages = []
        for achievement_id, achievement in self.table.items():
            if achievement_id in status.unlocked_achievements:
                continue
            try:
                met = all(self.condition_met(status, c) for c in achievement['conditions'])
            except ValidationFailure as exc:
                logger.warning("Skipping achievement %s: %s", achievement_id, exc)
                continue
            if not met:
                continue
            status.unlocked_achievements.add(achievement_id)
            messages.append(f"Achievement unlocked: {achievement['name']}")
            messages.extend(grant_reward(status, self.inventory, achievement.get('reward', {}), achievement_id))
        return messages


class TaskTracker:
    def __init__(self, inventory, table=None):
        self.inventory = inventory
        self.table = TASKS if table is None else table
        # (task_id, goal index) -> time the maintain_status goal started holding
        self._held_since = {}

    def prerequisites_met(self, status, task_id):
        prereq = self.table[task_id].get('prerequisites', {})
        if status.level < prereq.get('level', 0):
            return False
        if not set(prereq.get('tasks', [])) <= status.completed_tasks:
            return False
        return set(prereq.get('achievements', [])) <= status.unlocked_achievements

    def available_tasks(self, status):
        available = []
        for task_id, task in self.table.items():
            if task_id in status.active_tasks:
                continue
            if task_id in status.completed_tasks and not task.get('repeatable'):
                continue
            if self.prerequisites_met(status, task_id):
                available.append(task_id)
        return available

    def accept(self, status, task_id):
        if task_id not in self.table:
            logger.warning("accept_task ignored: %s", ValidationFailure(f"unknown task {task_id!r}"))
            return False
        if task_id not in self.available_tasks(status):
            logger.info("Task %s is not available", task_id)
            return False
        status.active_tasks.add(task_id)
        return True

    def goal_met(self, status, task_id, index, goal, now):
        kind = goal.get('type')
        if kind == 'perform_interaction':
            return status.count(goal['interaction']) >= goal['count']
        if kind == 'reach_status':
            return stat_value(status, goal['stat']) >= goal['target']
        if kind == 'maintain_status':
            key = (task_id, index)
            if now is None or stat_value(status, goal['stat']) < goal['target']:
                self._held_since.pop(key, None)
                return False
            since = self._held_since.setdefault(key, now)
            return now - since >= goal['duration']
        raise ValidationFailure(f"unknown task goal {kind!r}")

    def evaluate(self, status, now=None):
        messages = []
        for task_id, task in self.table.items():
            if task_id not in status.active_tasks:
                continue
            try:
                # every goal is checked so maintain timers keep running
                results = [self.goal_met(status, task_id, i, g, now) for i, g in enumerate(task['goals'])]
            except ValidationFailure as exc:
                logger.warning("Skipping task %s: %s", task_id, exc)
                continue
            if not all(results):
                continue
            status.active_tasks.discard(task_id)
            status.completed_tasks.add(task_id)
            for key in [k for k in self._held_since if k[0] == task_id]:
                del self._held_since[key]
            messages.append(f"Task complete: {task['name']}")
            messages.extend(grant_reward(status, self.inventory, task.get('reward', {}), task_id))
        return messages
