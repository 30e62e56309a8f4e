import tkinter
from tkinter import filedialog
import tkinter.messagebox as messagebox
import customtkinter as ctk
import os
import sys
import logging
import traceback

from gui import Tooltip, MessageDialog, ContextMenu, AboutDialog
from config import (
    APP_TITLE, APP_VERSION, SUCCESS_MESSAGE, THEME_COLORS, ThemeColor, CharacterClass,
    DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT,
)
from ticket_utils import AppData, character_set_for
from ticket_engine import TicketRunner
import cli

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# Log unexpected exceptions and keep the Tk main loop alive
def _global_excepthook(exc_type, exc, tb):
    trace_text = ''.join(traceback.format_exception(exc_type, exc, tb))
    logging.error("Unhandled exception:\n" + trace_text)
    try:
        messagebox.showerror("Application Error", f"An unexpected error occurred.\n\n{exc}\n\nSee log for details.")
    except tkinter.TclError:
        pass

class TicketRandomizerApp(ctk.CTk):
    def __init__(self, app_data=None):
        super().__init__()
        self.title(f"{APP_TITLE} v{APP_VERSION}")
        ctk.set_appearance_mode("System")
        self.theme_colors = THEME_COLORS[ThemeColor.BLUE]

        self.app_data = app_data or AppData()
        prefs = self.app_data.load_preferences()
        self.form = self.app_data.load_form_state()
        self.runner = TicketRunner()
        self.active_toplevel = None

        window = prefs["window"]
        width, height = window.get("width") or DEFAULT_WINDOW_WIDTH, window.get("height") or DEFAULT_WINDOW_HEIGHT
        self.update_idletasks()
        x = window.get("x") if window.get("x") is not None else (self.winfo_screenwidth() / 2) - (width / 2)
        y = window.get("y") if window.get("y") is not None else (self.winfo_screenheight() / 2) - (height / 2)
        self.geometry(f"{width}x{height}+{int(x)}+{int(y)}")
        self.minsize(420, 480)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.content_frame = ctk.CTkFrame(self, corner_radius=0, fg_color="transparent")
        self.content_frame.grid(row=0, column=0, sticky="nsew")
        self.content_frame.grid_columnconfigure(0, weight=1)
        self.content_frame.grid_rowconfigure(6, weight=1)

        self._create_widgets()
        self._refresh_character_set()
        self.update_status("Ready. Choose a character set and a destination.")
        self.protocol("WM_DELETE_WINDOW", self.on_close)

    def _create_widgets(self):
        fg_color = (self.theme_colors.fg_color[0], self.theme_colors.fg_color[1])
        hover_color = (self.theme_colors.hover_color[0], self.theme_colors.hover_color[1])

        ctk.CTkLabel(self.content_frame, text=APP_TITLE, font=("Segoe UI", 20, "bold")).grid(row=0, column=0, padx=10, pady=(10, 5), sticky="w")

        classes_frame = ctk.CTkFrame(self.content_frame)
        classes_frame.grid(row=1, column=0, padx=10, pady=5, sticky="ew")
        form_flags = {
            CharacterClass.CAPITALS: "capital_letters",
            CharacterClass.LOWERCASE: "lowercase_letters",
            CharacterClass.NUMBERS: "numbers",
            CharacterClass.SPECIALS: "specials",
        }
        self.class_vars = {}
        for i, (cls, attr) in enumerate(form_flags.items()):
            var = tkinter.BooleanVar(value=getattr(self.form, attr))
            self.class_vars[attr] = var
            ctk.CTkCheckBox(classes_frame, text=cls.label, variable=var, command=self._on_form_change,
                            fg_color=fg_color, hover_color=hover_color).grid(row=i, column=0, padx=10, pady=4, sticky="w")

        fields_frame = ctk.CTkFrame(self.content_frame)
        fields_frame.grid(row=2, column=0, padx=10, pady=5, sticky="ew")
        fields_frame.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(fields_frame, text="Excluded Characters:").grid(row=0, column=0, padx=10, pady=4, sticky="w")
        self.rejected_var = tkinter.StringVar(value=self.form.rejected_chars)
        self.rejected_var.trace_add('write', lambda *args: self._on_form_change())
        ctk.CTkEntry(fields_frame, textvariable=self.rejected_var).grid(row=0, column=1, padx=10, pady=4, sticky="ew")

        ctk.CTkLabel(fields_frame, text="Ticket Count:").grid(row=1, column=0, padx=10, pady=4, sticky="w")
        self.count_var = tkinter.StringVar(value=self.form.ticket_count_str)
        count_entry = ctk.CTkEntry(fields_frame, textvariable=self.count_var)
        count_entry.grid(row=1, column=1, padx=10, pady=4, sticky="ew")
        count_entry.bind("<FocusOut>", lambda e: self._commit_count())
        count_entry.bind("<Return>", lambda e: self._commit_count())

        ctk.CTkLabel(fields_frame, text="Ticket Length:").grid(row=2, column=0, padx=10, pady=4, sticky="w")
        self.length_var = tkinter.StringVar(value=self.form.ticket_length_str)
        length_entry = ctk.CTkEntry(fields_frame, textvariable=self.length_var)
        length_entry.grid(row=2, column=1, padx=10, pady=4, sticky="ew")
        length_entry.bind("<FocusOut>", lambda e: self._commit_length())
        length_entry.bind("<Return>", lambda e: self._commit_length())

        destination_frame = ctk.CTkFrame(self.content_frame)
        destination_frame.grid(row=3, column=0, padx=10, pady=5, sticky="ew")
        destination_frame.grid_columnconfigure(1, weight=1)
        self.destination_button = ctk.CTkButton(destination_frame, text="Select destination...", command=self.select_destination,
                                                width=150, fg_color=fg_color, hover_color=hover_color)
        self.destination_button.grid(row=0, column=0, padx=10, pady=10)
        self.destination_label = ctk.CTkLabel(destination_frame, text="No destination selected.", anchor="w")
        self.destination_label.grid(row=0, column=1, padx=10, pady=10, sticky="ew")
        self.destination_tooltip = Tooltip(self.destination_label, "")

        self.charset_label = ctk.CTkLabel(self.content_frame, text="", anchor="w", justify="left", wraplength=420)
        self.charset_label.grid(row=4, column=0, padx=12, pady=(5, 0), sticky="ew")

        self.submit_button = ctk.CTkButton(self.content_frame, text="Submit", command=self.start_processing, fg_color=fg_color, hover_color=hover_color)
        self.submit_button.grid(row=5, column=0, padx=10, pady=5, sticky="ew")
        self.bind("<Control-Return>", lambda e: self.start_processing())

        self.log_textbox = ctk.CTkTextbox(self.content_frame, state="disabled", wrap="word", height=120, font=ctk.CTkFont(family="Courier New", size=12))
        self.log_textbox.grid(row=6, column=0, padx=10, pady=(5, 0), sticky="nsew")

        status_frame = ctk.CTkFrame(self.content_frame)
        status_frame.grid(row=7, column=0, padx=10, pady=(5, 10), sticky="ew")
        status_frame.grid_columnconfigure(0, weight=1)
        self.status_text_label = ctk.CTkLabel(status_frame, text="", font=("Arial", 12), anchor="w")
        self.status_text_label.grid(row=0, column=0, padx=(10, 0), sticky="ew")
        self.open_file_button = ctk.CTkButton(status_frame, text="Open File", width=100, state="disabled",
                                              fg_color="transparent", border_width=1,
                                              text_color=("gray10", "gray90"),
                                              border_color=("gray70", "gray30"), hover_color=hover_color)
        self.open_file_button.grid(row=0, column=1, padx=10, pady=5, sticky="e")

        self.log_context_menu = ContextMenu(self)
        self.log_context_menu.add_command(label="Copy All", command=self.copy_log_to_clipboard)
        self.log_context_menu.add_command(label="Clear Log", command=self.clear_log)
        self.log_context_menu.add_separator()
        self.log_context_menu.add_command(label="Audit Last File", command=self.audit_last_file)
        self.log_context_menu.add_command(label="Reset Window Size", command=self.reset_window_size)
        self.log_context_menu.add_separator()
        self.log_context_menu.add_command(label="About", command=self.show_about)
        self.log_textbox.bind("<Button-3>", self.log_context_menu.show)

    def _sync_form(self):
        for attr, var in self.class_vars.items():
            setattr(self.form, attr, bool(var.get()))
        self.form.rejected_chars = self.rejected_var.get()
        self.form.ticket_count_str = self.count_var.get()
        self.form.ticket_length_str = self.length_var.get()

    def _on_form_change(self):
        self._sync_form()
        self._refresh_character_set()

    def _refresh_character_set(self):
        self.charset_label.configure(text=f"Current character set {character_set_for(self.form)}")

    def _commit_count(self):
        self._sync_form()
        self.form.commit_count_text()
        self.count_var.set(self.form.ticket_count_str)

    def _commit_length(self):
        self._sync_form()
        self.form.commit_length_text()
        self.length_var.set(self.form.ticket_length_str)

    def select_destination(self):
        path = filedialog.asksaveasfilename(title="Select destination", defaultextension=".csv", filetypes=(("csv", "*.csv"),))
        if not path: return

        path = os.path.normpath(path)
        self.form.file_path = path
        display_path = path if len(path) <= 40 else f"...{path[-37:]}"
        self.destination_label.configure(text=display_path)
        self.destination_tooltip.text = path
        self.update_status("Ready to generate.")

    def start_processing(self):
        self._commit_count()
        self._commit_length()
        if not self.runner.submit(self.form):
            return

        self.app_data.save_preferences(form=self.form)
        self.submit_button.configure(state="disabled")
        self.destination_button.configure(state="disabled")
        self.open_file_button.configure(state="disabled")
        self.update_status("Generating tickets...", "running")
        self.log_message(f"Generating {self.form.ticket_count} tickets of length {self.form.ticket_length}...")
        self.after(100, self.check_run_queue)

    def check_run_queue(self):
        message = self.runner.poll()
        if message is None:
            self.after(100, self.check_run_queue)
            return

        if message == SUCCESS_MESSAGE:
            self.update_status(message, "success")
            self.log_message(f"✅ {message}: {self.form.file_path}")
            path = self.form.file_path
            self.open_file_button.configure(state="normal", command=lambda p=path: self._open_file_path(p))
        else:
            self.update_status(message, "error")
            self.log_message(f"❌ {message}")
        self.submit_button.configure(state="normal")
        self.destination_button.configure(state="normal")

    def audit_last_file(self):
        from auditor import audit_ticket_file, format_table

        path = self.form.file_path
        if not path or not os.path.exists(path):
            MessageDialog(self, title="Nothing to Audit", message="Generate a ticket file first.")
            return
        try:
            result = audit_ticket_file(path, alphabet=character_set_for(self.form) or None,
                                       expected_length=self.form.ticket_length or None)
        except Exception as e:
            logging.error("Audit failed", exc_info=True)
            self.log_message(f"❌ Could not audit file: {e}")
            return
        self.log_message(format_table(result.summary_rows()))

    def update_status(self, text, state="default"):
        colors = {"default": ("gray10", "gray90"), "running": ("#FFA500", "#FF8C00"), "success": ("#2E7D32", "#66BB6A"), "error": ("#D32F2F", "#E57373")}
        self.status_text_label.configure(text=text, text_color=colors.get(state, colors["default"]))

    def log_message(self, message):
        self.log_textbox.configure(state="normal")
        self.log_textbox.insert("end", message + "\n")
        self.log_textbox.configure(state="disabled")
        self.log_textbox.see("end")

    def copy_log_to_clipboard(self):
        full_log_text = self.log_textbox.get("1.0", "end-1c")
        if full_log_text:
            self.clipboard_clear()
            self.clipboard_append(full_log_text)
            self.update_status("Log content copied to clipboard.")
        else:
            self.update_status("Log is empty.")

    def clear_log(self):
        self.log_textbox.configure(state="normal")
        self.log_textbox.delete("1.0", "end")
        self.log_textbox.configure(state="disabled")

    def reset_window_size(self):
        self.update_idletasks()
        x = (self.winfo_screenwidth() / 2) - (DEFAULT_WINDOW_WIDTH / 2)
        y = (self.winfo_screenheight() / 2) - (DEFAULT_WINDOW_HEIGHT / 2)
        self.geometry(f"{DEFAULT_WINDOW_WIDTH}x{DEFAULT_WINDOW_HEIGHT}+{int(x)}+{int(y)}")

    def show_about(self):
        if self.active_toplevel is not None and self.active_toplevel.winfo_exists():
            self.active_toplevel.lift()
            return
        AboutDialog(self,
                    title_text=f"{APP_TITLE} v{APP_VERSION}",
                    desc_text="Generates unique random tickets from a chosen character set and saves them as CSV.",
                    capabilities=[
                        "Pick capitals, lowercase, numbers and specials, then exclude look-alike characters.",
                        "Every ticket in a run is unique.",
                        "Runs in the background so the window stays responsive.",
                    ],
                    footer_text="One ticket per row, no header.",
                    theme_colors=self.theme_colors)

    def _open_file_path(self, path_to_open):
        try:
            if sys.platform == "win32": os.startfile(os.path.normpath(path_to_open))
            elif sys.platform == "darwin": os.system(f'open "{os.path.normpath(path_to_open)}"')
            else: os.system(f'xdg-open "{os.path.normpath(path_to_open)}"')
        except OSError as e:
            self.log_message(f"❌ Could not open file: {e}")

    def on_close(self):
        self._sync_form()
        self.app_data.save_preferences(form=self.form, window={
            "width": self.winfo_width(), "height": self.winfo_height(),
            "x": self.winfo_x(), "y": self.winfo_y(),
        })
        self.destroy()

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if cli.wants_cli(argv):
        return cli.main(argv)

    sys.excepthook = _global_excepthook
    app = TicketRandomizerApp()
    app.mainloop()
    return 0

if __name__ == "__main__":
    sys.exit(main())
