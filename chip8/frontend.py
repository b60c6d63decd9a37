"""
Tkinter front end: window, renderer, keyboard and controller input.

Everything here is host-side. The machine is driven from the Tk event loop
with ``root.after``, so the CPU only ever runs on the GUI thread.
"""

import logging
import os
import pickle
import time
import tkinter as tk
from dataclasses import dataclass
from tkinter import filedialog, messagebox
from typing import Optional

from .constants import DISPLAY_WIDTH, DISPLAY_HEIGHT
from .controller import Chip8Controller
from .cpu import Chip8CPU, StepResult
from .errors import MachineFault, ProgramTooLarge

logger = logging.getLogger(__name__)


@dataclass
class EmulatorConfig:
    """Front end settings"""
    # Timing
    cycles_per_frame: int = 10    # Instructions executed per rendered frame
    target_fps: int = 60
    speed_multiplier: int = 1     # 1, 2, 4 or 8
    max_speed: int = 8

    # Window
    scale: int = 10
    status_bar_height: int = 30
    pixel_color: str = "#C0C0C0"
    bg_color: str = "#1A1A1A"
    status_bg: str = "#2A2A2A"
    status_fg: str = "#888888"

    # Input
    controller: bool = True

    @property
    def width(self) -> int:
        return DISPLAY_WIDTH * self.scale

    @property
    def height(self) -> int:
        return DISPLAY_HEIGHT * self.scale


class Chip8Renderer:
    """Tkinter display renderer"""

    def __init__(self, canvas: tk.Canvas, config: EmulatorConfig):
        self.canvas = canvas
        self.config = config
        self.pixel_rects = {}

        # Pre-create pixel rectangles for efficiency
        self._create_pixels()

    def _create_pixels(self):
        """Pre-create all pixel rectangles"""
        self.canvas.delete("all")
        self.pixel_rects = {}
        scale = self.config.scale

        for y in range(DISPLAY_HEIGHT):
            for x in range(DISPLAY_WIDTH):
                rect = self.canvas.create_rectangle(
                    x * scale, y * scale, (x + 1) * scale, (y + 1) * scale,
                    fill=self.config.bg_color, outline=""
                )
                self.pixel_rects[(x, y)] = rect

    def render(self, rows: list):
        """Render the frame buffer to the canvas"""
        for y, row in enumerate(rows):
            for x, value in enumerate(row):
                color = self.config.pixel_color if value else self.config.bg_color
                self.canvas.itemconfig(self.pixel_rects[(x, y)], fill=color)


class Chip8GUI:
    """Main application window"""

    def __init__(self, cpu: Optional[Chip8CPU] = None, config: Optional[EmulatorConfig] = None):
        self.config = config or EmulatorConfig()
        self.cpu = cpu or Chip8CPU()

        self.root = tk.Tk()
        self.root.title("CHIP-8")
        self.root.geometry(f"{self.config.width}x{self.config.height + self.config.status_bar_height}")
        self.root.resizable(False, False)
        self.root.configure(bg=self.config.bg_color)

        # State
        self.rom_data: Optional[bytes] = None
        self.rom_name = ""
        self.rom_path: Optional[str] = None
        self.running = False
        self.paused = False
        self.fps = 0
        self.frame_count = 0
        self.last_fps_time = time.time()

        self._create_ui()
        self.renderer = Chip8Renderer(self.canvas, self.config)
        self._bind_keys()

        self.controller: Optional[Chip8Controller] = None
        if self.config.controller:
            self.controller = Chip8Controller(self.cpu.keypad.press)
            self.controller.on_reset = self._reset
            self.controller.on_pause_toggle = self._toggle_pause
            self.controller.start()

    def _create_ui(self):
        """Create UI components"""
        self.canvas = tk.Canvas(
            self.root,
            width=self.config.width,
            height=self.config.height,
            bg=self.config.bg_color,
            highlightthickness=0
        )
        self.canvas.pack(side=tk.TOP)

        self.status_frame = tk.Frame(
            self.root,
            height=self.config.status_bar_height,
            bg=self.config.status_bg
        )
        self.status_frame.pack(side=tk.BOTTOM, fill=tk.X)
        self.status_frame.pack_propagate(False)

        self.rom_label = self._status_label("No ROM", tk.LEFT)
        self.fps_label = self._status_label("FPS: 0", tk.LEFT)
        self.state_label = self._status_label("Stopped", tk.RIGHT)
        self.speed_label = self._status_label(f"{self.config.speed_multiplier}x", tk.RIGHT)

    def _status_label(self, text: str, side: str) -> tk.Label:
        label = tk.Label(
            self.status_frame,
            text=text,
            fg=self.config.status_fg,
            bg=self.config.status_bg,
            font=("Courier", 10)
        )
        label.pack(side=side, padx=10)
        return label

    def _bind_keys(self):
        """Bind keyboard events"""
        self.root.bind("<KeyPress>", self._on_key_down)

        # Control keys
        self.root.bind("<Control-r>", lambda e: self._reset())
        self.root.bind("<Control-o>", lambda e: self._open_file_dialog())
        self.root.bind("<space>", lambda e: self._toggle_pause())
        self.root.bind("<F5>", lambda e: self._save_state())
        self.root.bind("<F7>", lambda e: self._load_state())
        self.root.bind("<F1>", lambda e: self._decrease_speed())
        self.root.bind("<F2>", lambda e: self._increase_speed())

    def _on_key_down(self, event):
        """Handle key press"""
        self.cpu.keypad.press_host_key(event.keysym)

    def _open_file_dialog(self):
        """Open file dialog to select ROM"""
        filepath = filedialog.askopenfilename(
            title="Select CHIP-8 ROM",
            filetypes=[("CHIP-8 ROM", "*.ch8"), ("All files", "*.*")]
        )
        if filepath:
            self.load_rom_file(filepath)

    def load_rom_file(self, filepath: str):
        """Load ROM from file and start running it"""
        try:
            with open(filepath, 'rb') as f:
                data = f.read()
        except OSError as e:
            messagebox.showerror("Error", f"Failed to read ROM: {e}")
            return
        try:
            self.load_rom(data, os.path.basename(filepath), filepath)
        except ProgramTooLarge as e:
            messagebox.showerror("Error", str(e))

    def load_rom(self, data: bytes, name: str, path: Optional[str] = None):
        self.cpu.reset()
        self.cpu.load_program(data)
        self.rom_data = data
        self.rom_name = name
        self.rom_path = path
        self.rom_label.config(text=f"ROM: {name}")
        logger.info("Loaded ROM %s (%d bytes)", name, len(data))
        self.renderer.render(self.cpu.display.rows())
        self._start_emulation()

    def _start_emulation(self):
        self.paused = False
        if not self.running:
            self.running = True
            self._frame()
        self._update_status()

    def _frame(self):
        """Run one frame worth of instructions, then render"""
        if not self.running:
            return

        if self.controller is not None:
            self.controller.poll()

        if not self.paused:
            cycles = self.config.cycles_per_frame * self.config.speed_multiplier
            try:
                result = self.cpu.run(max_steps=cycles)
            except MachineFault as e:
                logger.error("Emulation stopped: %s", e)
                self.running = False
                self._update_status()
                messagebox.showerror("CPU fault", str(e))
                return
            if result is StepResult.HALTED:
                logger.info("Program halted at %03X", self.cpu.pc)
                self.running = False
                self._update_status()

        if self.cpu.display.draw_flag:
            self.renderer.render(self.cpu.display.rows())
            self.cpu.display.draw_flag = False

        # Update FPS counter
        self.frame_count += 1
        now = time.time()
        if now - self.last_fps_time >= 1.0:
            self.fps = self.frame_count
            self.frame_count = 0
            self.last_fps_time = now
            self.fps_label.config(text=f"FPS: {self.fps}")

        if self.running:
            self.root.after(1000 // self.config.target_fps, self._frame)

    def _update_status(self):
        """Update status display"""
        if self.cpu.fault is not None:
            self.state_label.config(text="Fault")
        elif self.paused:
            self.state_label.config(text="Paused")
        elif self.running:
            self.state_label.config(text="Running")
        else:
            self.state_label.config(text="Stopped")

        self.speed_label.config(text=f"{self.config.speed_multiplier}x")

    def _reset(self):
        """Reload the current ROM"""
        if self.rom_data is not None:
            self.load_rom(self.rom_data, self.rom_name, self.rom_path)

    def _toggle_pause(self):
        self.paused = not self.paused
        self._update_status()

    def _save_path(self) -> str:
        """Save file beside the ROM, or in the working directory for in-memory ROMs"""
        folder = os.path.dirname(self.rom_path) if self.rom_path else ""
        return os.path.join(folder, f"{self.rom_name}.sav")

    def _save_state(self):
        """Save current state beside the ROM"""
        if self.rom_data is None:
            return
        try:
            with open(self._save_path(), 'wb') as f:
                pickle.dump(self.cpu.snapshot(), f)
        except OSError as e:
            logger.error("Save failed: %s", e)

    def _load_state(self):
        if self.rom_data is None:
            return
        try:
            with open(self._save_path(), 'rb') as f:
                state = pickle.load(f)
        except FileNotFoundError:
            logger.info("No save state at %s", self._save_path())
            return
        except (OSError, pickle.UnpicklingError) as e:
            logger.error("Load failed: %s", e)
            return
        self.cpu.restore(state)
        self.renderer.render(self.cpu.display.rows())
        self._start_emulation()

    def _increase_speed(self):
        if self.config.speed_multiplier < self.config.max_speed:
            self.config.speed_multiplier *= 2
            self._update_status()

    def _decrease_speed(self):
        if self.config.speed_multiplier > 1:
            self.config.speed_multiplier //= 2
            self._update_status()

    def run(self):
        """Run the application"""
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.root.mainloop()

    def _on_close(self):
        self.running = False
        if self.controller is not None:
            self.controller.stop()
        self.root.destroy()
