# src/uniflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import maybe_refresh_advice, start_advice_refresh, start_subtask_breakdown
from ..tasks.task_models import Category, FilterType, Priority, parse_category, parse_priority
from ..tasks.task_views import compute_stats, select_visible_tasks
from .render import (
    EMPTY_LIST_TEXT,
    TAB_TITLES,
    format_stats,
    format_task_details,
    format_task_line,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw_args: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        """
        raw_args=True hands the handler the text after the command name
        unsplit, as a single-item list.
        """
        aliases = aliases or []
        keys = [name.lower()] + [a.lower() for a in aliases]
        for key in keys:
            self._handlers[key] = handler
            if raw_args:
                self._raw_args.add(key)
        self._help[keys[0]] = help_text

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""
        if name in self._raw_args:
            args = [rest] if rest else []
        else:
            args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def parse_due_arg(raw: str, *, today: date | None = None) -> str:
    """`today` / `tomorrow` shortcuts; anything else is passed through for the store to validate."""
    s = raw.strip().lower()
    base = today or date.today()
    if s == "today":
        return base.isoformat()
    if s == "tomorrow":
        return (base + timedelta(days=1)).isoformat()
    return raw.strip()


def resolve_task_ref(state: AppState, ref: str) -> str | None:
    """
    A task reference is either its number in the last /list output or a
    prefix of its id.
    """
    ref = ref.strip()
    if not ref:
        return None
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(state.last_view):
            return state.last_view[n - 1]
        return None
    matches = [t.id for t in state.store.tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _render_list(state: AppState) -> str:
    visible = select_visible_tasks(state.store.tasks, state.active_filter, state.search_query)
    state.last_view = [t.id for t in visible]

    header = TAB_TITLES[state.active_filter]
    if state.search_query:
        header += f' (search: "{state.search_query}")'
    lines = [header]

    if state.active_filter != FilterType.COMPLETED:
        if state.advice:
            lines.append(f'  Smart Insight: "{state.advice}"')
        elif state.advice_loading:
            lines.append("  Smart Insight: thinking...")

    if not visible:
        lines.append(EMPTY_LIST_TEXT)
        return "\n".join(lines)

    for i, task in enumerate(visible, start=1):
        lines.append(format_task_line(i, task, generating=task.id in state.generating_ids))
    return "\n".join(lines)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    model = getattr(state.llm, "model", None) or "offline"
    return (
        "Status:\n"
        f"  Tab: {state.active_filter.value}\n"
        f"  Search: {state.search_query or '(none)'}\n"
        f"  Storage: {getattr(s, 'storage_backend', '?')}\n"
        f"  Model: {model}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> | <description> | <category> | <priority> | <due>

    Only the title is required. Defaults: Homework, Medium, no due date.
    """
    raw = args[0] if args else ""
    fields = [f.strip() for f in raw.split("|")]
    fields += [""] * (5 - len(fields))
    title, description, category_s, priority_s, due_s = fields[:5]

    try:
        category = parse_category(category_s) if category_s else Category.HOMEWORK
        priority = parse_priority(priority_s) if priority_s else Priority.MEDIUM
    except ValueError as e:
        return (
            f"{e}.\n"
            f"  Categories: {', '.join(c.value for c in Category)}\n"
            f"  Priorities: {', '.join(p.value for p in Priority)}"
        )

    task = state.store.create(
        title,
        description=description,
        priority=priority,
        category=category,
        due_date=parse_due_arg(due_s) if due_s else None,
    )
    if task is None:
        return "Usage: /add <title> | <description> | <category> | <priority> | <YYYY-MM-DD|today|tomorrow>"

    maybe_refresh_advice(state)
    return f"Added: {task.title} ({task.priority.value}, {task.category.value})"


def cmd_list(state: AppState, args: list[str]) -> str:
    return _render_list(state)


def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = resolve_task_ref(state, args[0]) if args else None
    task = state.store.get(task_id) if task_id else None
    if task is None:
        return "Usage: /show <n> (number from /list)."
    return format_task_details(task)


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = resolve_task_ref(state, args[0]) if args else None
    if not task_id or not state.store.toggle_complete(task_id):
        return "Usage: /done <n> (number from /list)."
    task = state.store.get(task_id)
    return f"{'Completed' if task and task.completed else 'Reopened'}: {task.title if task else task_id}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = resolve_task_ref(state, args[0]) if args else None
    task = state.store.get(task_id) if task_id else None
    if task is None or not state.store.delete(task.id):
        return "Usage: /del <n> (number from /list)."
    state.last_view = [i for i in state.last_view if i != task.id]
    maybe_refresh_advice(state)
    return f"Deleted: {task.title}"


def cmd_subtask(state: AppState, args: list[str]) -> str:
    if len(args) < 2 or not args[1].isdigit():
        return "Usage: /sub <n> <step> (see /show <n>)."
    task_id = resolve_task_ref(state, args[0])
    task = state.store.get(task_id) if task_id else None
    step = int(args[1])
    if task is None or not (1 <= step <= len(task.subtasks)):
        return "Usage: /sub <n> <step> (see /show <n>)."
    sub = task.subtasks[step - 1]
    state.store.toggle_subtask(task.id, sub.id)
    return f"{'[x]' if sub.completed else '[ ]'} {sub.title}"


def cmd_break(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task_id = resolve_task_ref(state, args[0]) if args else None
    task = state.store.get(task_id) if task_id else None
    if task is None:
        return "Usage: /break <n> (number from /list)."
    if task.id in state.generating_ids:
        return f"Already breaking down: {task.title}"

    job = start_subtask_breakdown(state, task.id)
    if job is not None and emit is not None:
        title = task.title

        def _done(t) -> None:
            if t.cancelled() or t.exception() is not None:
                return
            emit(f"AI steps added to: {title}" if t.result() else f"No AI steps for: {title}")

        job.add_done_callback(_done)
    return f"Breaking down: {task.title}..."


def cmd_tab(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in {f.value for f in FilterType}:
        return "Usage: /tab all | today | upcoming | completed"
    state.active_filter = FilterType(args[0].lower())
    return _render_list(state)


def cmd_search(state: AppState, args: list[str]) -> str:
    state.search_query = " ".join(args).strip()
    return _render_list(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(compute_stats(state.store.tasks))


def cmd_advice(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/advice -> show the banner; /advice new -> fetch a fresh one."""
    if args and args[0].lower() in ("new", "refresh"):
        job = start_advice_refresh(state)
        if job is None:
            return "Advice is already on its way."
        if emit is not None:

            def _done(t) -> None:
                if not t.cancelled() and t.exception() is None:
                    emit(f'Smart Insight: "{t.result()}"')

            job.add_done_callback(_done)
        return "Asking for advice..."
    if state.advice:
        return f'Smart Insight: "{state.advice}"'
    if state.advice_loading:
        return "Smart Insight: thinking..."
    return "No advice yet. Use /advice new."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current tab/search/storage/model.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add title | details | category | priority | due.",
    aliases=["new"],
    raw_args=True,
)
registry.register("list", cmd_list, help_text="List tasks for the current tab.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show a task with its steps: /show <n>.")
registry.register("done", cmd_done, help_text="Toggle complete: /done <n>.")
registry.register("del", cmd_delete, help_text="Delete a task: /del <n>.", aliases=["rm"])
registry.register("sub", cmd_subtask, help_text="Toggle a step: /sub <n> <step>.")
registry.register("break", cmd_break, help_text="AI breakdown into steps: /break <n>.")
registry.register("tab", cmd_tab, help_text="Switch tab: /tab all | today | upcoming | completed.")
registry.register("search", cmd_search, help_text="Filter by title/category: /search <text> (empty clears).")
registry.register("stats", cmd_stats, help_text="Show completion progress.")
registry.register("advice", cmd_advice, help_text="Show the smart insight: /advice | /advice new.")
