"""Command-line interface loop for the Gantt planner.

Every command mutates the store (or the zoom state), then the whole
screen is rebuilt from build_view(); nothing is patched incrementally.
The store is saved after each mutation; a failed save only shows a
warning and keeps the in-memory tasks.
"""
import asyncio
from typing import List, Optional

from errors import PlannerError
from generator import GenerationController
from layout import ZoomState
from models import COLORS, DEFAULT_COLOR
from render import display
from store import TaskStore
from theme import EMPTY_COLOR, color
from view import build_view


def _clear_screen() -> None:
    # ESC[3J (scrollback) first, then home/clear; more reliable in some terminals
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


def _parse_id(raw: str) -> Optional[int]:
    raw = raw.rstrip('.')
    return int(raw) if raw.isdigit() else None


class CLI:
    def __init__(self, store: TaskStore, storage, zoom: Optional[ZoomState] = None,
                 generator: Optional[GenerationController] = None, alt_screen: bool = True):
        self.store: TaskStore = store
        self.storage = storage
        self.zoom: ZoomState = zoom or ZoomState()
        self.generator = generator
        self.alt_screen: bool = alt_screen
        self.message: str = ''

    def run(self) -> None:
        """Main REPL loop; the screen is cleared and redrawn each cycle."""
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                _clear_screen()
                display(build_view(self.store, self.zoom))
                if self.message:
                    print('\n' + self.message)
                    self.message = ''
                line = input("\n: ").strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    self._help()
                    input("\nPress Enter to return to the chart...")
                    continue
                if lower == 'exit':
                    exit_message = "Goodbye."
                    break
                self.handle_command(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        cmd = tokens[0].lower()
        handler = {
            'add': self._cmd_add,
            'edit': self._cmd_edit,
            'done': self._cmd_done,
            'undo': self._cmd_undo,
            'rm': self._cmd_rm,
            'remove': self._cmd_rm,
            'zoom': self._cmd_zoom,
            '+': self._cmd_zoom,
            '-': self._cmd_zoom,
            'fit': self._cmd_fit,
            'gen': self._cmd_gen,
        }.get(cmd)
        if handler is None:
            self.message = "Unknown command. Type 'help' for instructions."
            return
        try:
            handler(tokens)
        except PlannerError as exc:
            self.message = color(str(exc), EMPTY_COLOR)

    def _persist(self) -> None:
        if not self.storage.save(self.store.all_tasks()):
            self.message = (self.message + '\n' if self.message else '') + \
                'Warning: tasks could not be saved; changes are kept in memory only.'

    # ---- individual command helpers ----
    def _cmd_add(self, tokens: List[str]) -> None:
        if len(tokens) == 1:
            name = input("Task name: ").strip()
            start = input("Start date (YYYY-MM-DD): ").strip()
            end = input("End date (YYYY-MM-DD): ").strip()
            task_color = input(f"Color ({'/'.join(COLORS)}) [{DEFAULT_COLOR}]: ").strip() or DEFAULT_COLOR
        else:
            if len(tokens) < 4:
                self.message = "Usage: add <start> <end> [color] <name...>"
                return
            start, end, rest = tokens[1], tokens[2], tokens[3:]
            task_color = DEFAULT_COLOR
            if rest[0].lower() in COLORS and len(rest) > 1:
                task_color, rest = rest[0].lower(), rest[1:]
            name = ' '.join(rest)
        task = self.store.add(name, start, end, task_color)
        self.message = f'Task {task.id} added.'
        self._persist()

    def _cmd_edit(self, tokens: List[str]) -> None:
        if len(tokens) != 2 or _parse_id(tokens[1]) is None:
            self.message = "Usage: edit <id>"
            return
        task = self.store.get(_parse_id(tokens[1]))
        print("Press Enter to keep the current value.")
        fields = {
            'name': input(f"Task name [{task.name}]: ").strip() or task.name,
            'start': input(f"Start date [{task.start}]: ").strip() or task.start,
            'end': input(f"End date [{task.end}]: ").strip() or task.end,
            'color': input(f"Color [{task.color}]: ").strip() or task.color,
        }
        self.store.update(task.id, **fields)
        self.message = f'Task {task.id} updated.'
        self._persist()

    def _set_completed(self, tokens: List[str], completed: bool) -> None:
        if len(tokens) != 2 or _parse_id(tokens[1]) is None:
            self.message = f"Usage: {tokens[0].lower()} <id>"
            return
        self.store.set_completed(_parse_id(tokens[1]), completed)
        self._persist()

    def _cmd_done(self, tokens: List[str]) -> None:
        self._set_completed(tokens, True)

    def _cmd_undo(self, tokens: List[str]) -> None:
        self._set_completed(tokens, False)

    def _cmd_rm(self, tokens: List[str]) -> None:
        if len(tokens) != 2 or _parse_id(tokens[1]) is None:
            self.message = "Usage: rm <id>"
            return
        task = self.store.remove(_parse_id(tokens[1]))
        self.message = f'Task "{task.name}" removed.'
        self._persist()

    def _cmd_zoom(self, tokens: List[str]) -> None:
        direction = tokens[0] if tokens[0] in {'+', '-'} else (tokens[1] if len(tokens) == 2 else '')
        if direction in {'+', 'in'}:
            self.zoom.zoom_in()
        elif direction in {'-', 'out'}:
            self.zoom.zoom_out()
        else:
            self.message = "Usage: zoom +|-"

    def _cmd_fit(self, tokens: List[str]) -> None:
        self.zoom.toggle_fit()

    def _cmd_gen(self, tokens: List[str]) -> None:
        if self.generator is None:
            self.message = "Task generation is not configured."
            return
        prompt = ' '.join(tokens[1:]).strip() or input("Describe your project: ").strip()
        print("Generating tasks...", flush=True)
        outcome = asyncio.run(self.generator.run(prompt))
        if not outcome.accepted:
            self.message = "Generation result discarded."
            return
        notes = [f'{outcome.task_count} task(s) generated.'] + outcome.warnings
        self.message = '\n'.join(notes)
        self._persist()

    # -------------------- help --------------------
    def _help(self) -> None:
        print("Commands:")
        print("  add                               Add a task (prompts for each field)")
        print("  add <start> <end> [color] <name>  Shorthand add, e.g. add 2024-07-01 2024-07-05 red Write report")
        print("  edit <id>                         Edit name, dates and color (Enter keeps a value)")
        print("  done <id> / undo <id>             Mark a task completed / not completed")
        print("  rm <id>                           Remove a task")
        print("  zoom + / zoom - (or + / -)        Change the day width by 10px (leaves fit mode)")
        print("  fit                               Toggle fit-to-width (day/week/month units)")
        print("  gen <description>                 Replace all tasks with a generated plan")
        print("  help                              Show this help (press Enter to return)")
        print("  exit                              Exit")
