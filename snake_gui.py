# Tkinter front end: mode selection, controls and drawing of session snapshots.
from __future__ import annotations

from dataclasses import replace
import tkinter as tk
from tkinter import messagebox

# Support both package imports and running this file directly.
try:
    from .game_logic import DOWN, LEFT, RIGHT, UP, GameSession, SnakeConfig, cell_to_pixel
except ImportError:
    from game_logic import DOWN, LEFT, RIGHT, UP, GameSession, SnakeConfig, cell_to_pixel


FRAME_MS = 16   # roughly one animation frame; the session throttles logical steps


class SnakeApp:
    """Tkinter presentation layer for GameSession."""
    BG = "#101418"
    BOARD_BG = "#ffffff"
    SIDEBAR_BG = "#0f1720"
    SNAKE_COLOR = "#00ff00"
    FOOD_COLOR = "#ff0000"
    OBSTACLE_COLOR = "#808080"
    PATH_COLOR = "#b7f7c4"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"

    def __init__(self, root: tk.Tk, config: SnakeConfig | None = None) -> None:
        self.root = root
        self.root.title("Snake Autopilot")
        self.root.configure(bg=self.BG)

        self.config = config if config is not None else SnakeConfig()
        self.session: GameSession | None = None     # None while the mode screen is shown
        self.after_id: str | None = None            # Tkinter timer id for the frame loop
        self.show_path = tk.BooleanVar(value=True)

        self._build_layout()
        self._bind_keys()
        self.show_mode_selection()

    def _build_layout(self) -> None:
        """Create game canvas + right sidebar."""
        container = tk.Frame(self.root, bg=self.BG)
        container.pack(fill="both", expand=True, padx=16, pady=16)

        width, height = self.config.pixel_size
        self.canvas = tk.Canvas(
            container,
            width=width,
            height=height,
            bg=self.BOARD_BG,
            highlightthickness=0,
            bd=0,
        )
        self.canvas.pack(side="left", padx=(0, 16))

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG, width=260)
        self.sidebar.pack(side="right", fill="y")

        tk.Label(
            self.sidebar,
            text="Snake Autopilot",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 16, "bold"),
        ).pack(anchor="w", padx=16, pady=(16, 10))

        self.score_var = tk.StringVar(value="Score: 0")
        self.state_var = tk.StringVar(value="State: Choose a mode")
        self.control_var = tk.StringVar(value="Control: Auto")
        for var in (self.score_var, self.state_var, self.control_var):
            tk.Label(
                self.sidebar,
                textvariable=var,
                fg=self.TEXT_PRIMARY,
                bg=self.SIDEBAR_BG,
                font=("Helvetica", 11),
                anchor="w",
            ).pack(fill="x", padx=16, pady=2)

        buttons = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        buttons.pack(fill="x", padx=16, pady=(14, 10))
        self._button(buttons, "Maze Mode", lambda: self.start_game("maze")).pack(fill="x", pady=4)
        self._button(buttons, "Random Mode", lambda: self.start_game("random")).pack(fill="x", pady=4)
        self._button(buttons, "Mode Select", self.show_mode_selection).pack(fill="x", pady=4)
        self._button(buttons, "Add Obstacles", self.add_obstacles).pack(fill="x", pady=4)
        self._button(buttons, "Toggle Auto", self.toggle_auto).pack(fill="x", pady=4)

        tk.Checkbutton(
            self.sidebar,
            text="Show planned path",
            variable=self.show_path,
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            selectcolor=self.SIDEBAR_BG,
            activebackground=self.SIDEBAR_BG,
        ).pack(anchor="w", padx=16)

        tk.Label(
            self.sidebar,
            text="Move: Arrow keys / WASD (manual)\nSpace: restart after game over",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            justify="left",
            font=("Helvetica", 10),
        ).pack(anchor="w", padx=16, pady=(10, 10))

    def _button(self, parent: tk.Widget, text: str, command) -> tk.Button:
        return tk.Button(
            parent,
            text=text,
            command=command,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            activeforeground="#09141f",
            bd=0,
            relief="flat",
            font=("Helvetica", 11, "bold"),
            padx=12,
            pady=7,
            cursor="hand2",
        )

    def _bind_keys(self) -> None:
        """Bind movement controls and spacebar restart."""
        for keys, direction in (
            (("<Up>", "w"), UP),
            (("<Down>", "s"), DOWN),
            (("<Left>", "a"), LEFT),
            (("<Right>", "d"), RIGHT),
        ):
            for key in keys:
                self.root.bind(key, lambda _e, d=direction: self.steer(d))
        self.root.bind("<space>", lambda _e: self.restart())

    def steer(self, direction: tuple[int, int]) -> None:
        if self.session is not None:
            self.session.set_direction(*direction)

    def _cancel_loop(self) -> None:
        """Cancel scheduled frame callback if one exists."""
        if self.after_id is not None:
            self.root.after_cancel(self.after_id)
            self.after_id = None

    def show_mode_selection(self) -> None:
        """Stop play and draw the mode prompt."""
        self._cancel_loop()
        self.session = None
        self.state_var.set("State: Choose a mode")
        width, height = self.config.pixel_size
        self.canvas.delete("all")
        self.canvas.create_text(
            width // 2,
            height // 3,
            text="Choose a game mode",
            fill="#000000",
            font=("Helvetica", 20, "bold"),
        )
        self.canvas.create_text(
            width // 2,
            height // 2,
            text="Maze Mode or Random Mode in the sidebar",
            fill="#333333",
            font=("Helvetica", 12),
        )

    def start_game(self, mode: str) -> None:
        """Build a session for mode and start the frame loop."""
        self._cancel_loop()
        try:
            if self.session is None:
                self.session = GameSession(replace(self.config, mode=mode))
            else:
                self.session.reset(mode)
        except ValueError as exc:
            messagebox.showerror("Invalid Setting", str(exc))
            return
        self.state_var.set(f"State: Running ({mode})")
        self.frame()

    def restart(self) -> None:
        if self.session is not None and not self.session.alive:
            self.start_game(self.session.mode)

    def add_obstacles(self) -> None:
        if self.session is None or not self.session.alive:
            return
        self.session.add_obstacles()
        self.draw()

    def toggle_auto(self) -> None:
        if self.session is None:
            self.config.autopilot = not self.config.autopilot
            auto = self.config.autopilot
        else:
            auto = self.session.toggle_autopilot()
        self.control_var.set(f"Control: {'Auto' if auto else 'Manual'}")

    def frame(self) -> None:
        """Single animation frame; reschedules itself until game over."""
        self._cancel_loop()
        if self.session is None:
            return

        result = self.session.tick()
        self.draw()
        if not result.alive:
            reason = self.session.death_reason or "collision"
            self.state_var.set(f"State: Game Over ({reason})")
            return
        self.after_id = self.root.after(FRAME_MS, self.frame)

    def _fill_cell(self, cell: tuple[int, int], color: str, inset: int = 0) -> None:
        block = self.config.block_size
        x, y = cell_to_pixel(cell, block)
        self.canvas.create_rectangle(
            x + inset, y + inset, x + block - inset, y + block - inset, fill=color, outline=""
        )

    def draw(self) -> None:
        """Render obstacles, food, path overlay, snake and game-over text."""
        if self.session is None:
            return
        snapshot = self.session.snapshot()
        self.canvas.delete("all")

        for cell in snapshot["obstacles"]:
            self._fill_cell(cell, self.OBSTACLE_COLOR)
        if snapshot["food"] is not None:
            self._fill_cell(snapshot["food"], self.FOOD_COLOR)
        if self.show_path.get() and snapshot["auto_mode"]:
            for cell in snapshot["path"][1:-1]:
                self._fill_cell(cell, self.PATH_COLOR, inset=self.config.block_size // 3)
        for cell in snapshot["snake"]:
            self._fill_cell(cell, self.SNAKE_COLOR)

        self.score_var.set(f"Score: {snapshot['score']}")
        self.control_var.set(f"Control: {'Auto' if snapshot['auto_mode'] else 'Manual'}")

        if not snapshot["alive"]:
            width, height = self.config.pixel_size
            self.canvas.create_text(
                width // 2,
                height // 2,
                text="Game Over! Press Space to restart",
                fill="#000000",
                font=("Helvetica", 18, "bold"),
            )


def run_gui(config: SnakeConfig | None = None) -> None:
    """Launch the Snake autopilot interface."""
    root = tk.Tk()
    SnakeApp(root, config)
    root.mainloop()


if __name__ == "__main__":
    run_gui()
