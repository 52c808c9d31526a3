"""
GUI for KeyCalc
Tkinter keypad, display and history list over the calculator engine
"""
import tkinter as tk
from tkinter import ttk
import config

BUTTON_ROWS = [
    ["MC", "MR", "M+", "M-", "⌫"],
    ["√", "x²", "1/x", "(", ")"],
    ["sin", "cos", "tan", "ln", "log"],
    ["7", "8", "9", "÷", "C"],
    ["4", "5", "6", "×", "CE"],
    ["1", "2", "3", "−", "%"],
    ["±", "0", ".", "+", "="],
]

OPERATOR_BUTTONS = ("÷", "×", "−", "+")

KEY_MAP = {
    "*": "×",
    "/": "÷",
    "-": "−",
    "\r": "=",
    "\n": "=",
}


class KeyCalcGUI:
    def __init__(self, root, calculator):
        self.root = root
        self.calculator = calculator
        self.T = config.THEME
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")
        self.root.configure(bg=self.T["bg"])
        self._history_ids = []

        self.create_widgets()
        self.root.bind('<Key>', self.on_key_press)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.render(self.calculator.state())

    def create_widgets(self):
        T = self.T

        # --- Left: display + keypad ---
        left = tk.Frame(self.root, bg=T["bg"])
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=6, pady=6)

        display_frame = tk.Frame(left, bg=T["display_bg"])
        display_frame.pack(side=tk.TOP, fill=tk.X)

        self.equation_label = tk.Label(display_frame, text="", font=config.EQUATION_FONT,
                                       bg=T["display_bg"], fg=T["subtext"], anchor=tk.E)
        self.equation_label.pack(side=tk.TOP, fill=tk.X, padx=8, pady=(4, 0))

        self.display = tk.Label(display_frame, text=config.DEFAULT_GLYPH, font=config.DISPLAY_FONT,
                                bg=T["display_bg"], fg=T["display_fg"], anchor=tk.E)
        self.display.pack(side=tk.TOP, fill=tk.X, padx=8)

        status = tk.Frame(display_frame, bg=T["display_bg"])
        status.pack(side=tk.TOP, fill=tk.X, padx=8, pady=(0, 4))
        self.memory_label = tk.Label(status, text="", font=config.LABEL_FONT,
                                     bg=T["display_bg"], fg=T["accent"], anchor=tk.W)
        self.memory_label.pack(side=tk.LEFT)
        self.error_label = tk.Label(status, text="", font=config.LABEL_FONT,
                                    bg=T["display_bg"], fg=T["danger"], anchor=tk.E)
        self.error_label.pack(side=tk.RIGHT)

        keypad = tk.Frame(left, bg=T["bg"])
        keypad.pack(side=tk.TOP, fill=tk.BOTH, expand=True, pady=(6, 0))
        for r, row in enumerate(BUTTON_ROWS):
            keypad.rowconfigure(r, weight=1)
            for c, key in enumerate(row):
                keypad.columnconfigure(c, weight=1)
                self._make_button(keypad, key).grid(row=r, column=c, sticky="nsew", padx=2, pady=2)

        # --- Right: history ---
        right = tk.Frame(self.root, bg=T["bg"])
        right.pack(side=tk.RIGHT, fill=tk.BOTH, padx=6, pady=6)

        tk.Label(right, text="History", font=(config.BUTTON_FONT[0], 12, "bold"),
                 bg=T["bg"], fg=T["accent"]).pack(side=tk.TOP, anchor=tk.W)

        self.search_var = tk.StringVar()
        self.search_var.trace_add("write", lambda *_: self.refresh_history())
        ttk.Entry(right, textvariable=self.search_var).pack(side=tk.TOP, fill=tk.X, pady=2)

        list_frame = tk.Frame(right, bg=T["bg"])
        list_frame.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self.history_list = tk.Listbox(list_frame, width=32, selectmode=tk.EXTENDED,
                                       bg=T["listbox_bg"], fg=T["listbox_fg"],
                                       font=config.LABEL_FONT, highlightthickness=0)
        sb = ttk.Scrollbar(list_frame, orient=tk.VERTICAL, command=self.history_list.yview)
        self.history_list.configure(yscrollcommand=sb.set)
        self.history_list.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        sb.pack(side=tk.RIGHT, fill=tk.Y)
        self.history_list.bind("<Double-Button-1>", lambda e: self.reuse_selected())

        actions = tk.Frame(right, bg=T["bg"])
        actions.pack(side=tk.TOP, fill=tk.X, pady=(4, 0))
        for text, command in (("Use", self.reuse_selected),
                              ("Pin", self.pin_selected),
                              ("Delete", self.delete_selected),
                              ("Clear", self.clear_history)):
            tk.Button(actions, text=text, command=command, font=config.LABEL_FONT,
                      bg=T["btn_bg"], fg=T["btn_fg"], relief=tk.FLAT).pack(side=tk.LEFT, expand=True, fill=tk.X, padx=1)

    def _make_button(self, parent, key):
        T = self.T
        if key == "=":
            bg, fg = T["equals_bg"], T["equals_fg"]
        elif key in OPERATOR_BUTTONS:
            bg, fg = T["btn_bg"], T["operator_fg"]
        else:
            bg, fg = T["btn_bg"], T["btn_fg"]
        return tk.Button(parent, text=key, font=config.BUTTON_FONT, bg=bg, fg=fg,
                         activebackground=T["display_bg"], relief=tk.FLAT,
                         command=lambda k=key: self.calculator_button_click(k))

    # ── Controller calls ──────────────────────────────────────────────────
    def calculator_button_click(self, button):
        """Handle calculator button clicks"""
        self.render(self.calculator.handle(button))

    def on_key_press(self, event):
        """Handle keyboard input"""
        if isinstance(self.root.focus_get(), ttk.Entry):
            return
        key = event.char
        if key and (key.isdigit() or key in ".+()%"):
            self.calculator_button_click(key)
        elif key in KEY_MAP:
            self.calculator_button_click(KEY_MAP[key])
        elif key == "=":
            self.calculator_button_click("=")
        elif event.keysym in ("BackSpace", "Escape"):
            self.calculator_button_click(event.keysym)

    def _selected_ids(self):
        return [self._history_ids[i] for i in self.history_list.curselection()]

    def reuse_selected(self):
        ids = self._selected_ids()
        if ids:
            self.render(self.calculator.reuse_history_entry(ids[0]))

    def pin_selected(self):
        ids = self._selected_ids()
        if ids:
            self.render(self.calculator.toggle_pin(ids[0]))

    def delete_selected(self):
        ids = self._selected_ids()
        if ids:
            self.render(self.calculator.delete_history(ids))

    def clear_history(self):
        self._show_confirm("Clear ALL calculation history?",
                           lambda: self.render(self.calculator.clear_history()))

    def on_close(self):
        # The launcher flushes the history once the main loop returns
        self.root.destroy()

    def _show_confirm(self, msg, on_yes):
        """Show an inline confirmation bar"""
        T = self.T
        bar = tk.Frame(self.root, bg=T["danger"])
        bar.place(relx=0.02, y=4, relwidth=0.96, height=36)
        bar.lift()
        tk.Label(bar, text=f"  {msg}", font=config.LABEL_FONT,
                 bg=T["danger"], fg="#FFFFFF", anchor="w").pack(side=tk.LEFT, fill=tk.X, expand=True)

        def _yes():
            bar.destroy()
            on_yes()

        tk.Button(bar, text=" Yes ", font=config.LABEL_FONT, bg=T["danger"], fg="#FFFFFF",
                  relief=tk.FLAT, bd=0, command=_yes).pack(side=tk.RIGHT, padx=2)
        tk.Button(bar, text=" No ", font=config.LABEL_FONT, bg=T["subtext"], fg="#FFFFFF",
                  relief=tk.FLAT, bd=0, command=bar.destroy).pack(side=tk.RIGHT, padx=2)

    # ── Rendering ─────────────────────────────────────────────────────────
    def render(self, state):
        """Update the display from controller state"""
        self.display.config(text=state['display_text'])
        self.equation_label.config(text=state['equation_text'])
        self.error_label.config(text=state['error_message'] or "")
        memory = state['memory_value']
        self.memory_label.config(text="M" if memory is not None else "")
        self.refresh_history()

    def refresh_history(self):
        entries = self.calculator.search_history(self.search_var.get())
        self.history_list.delete(0, tk.END)
        self._history_ids = []
        for entry in entries:
            pin = "📌 " if entry['is_pinned'] else ""
            self.history_list.insert(tk.END, f"{pin}{entry['expression_text']} = {entry['formatted_result']}")
            self._history_ids.append(entry['id'])
