import customtkinter as ctk
import tkinter

from config import ThemeColors

def themed_button_colors(theme: ThemeColors = None):
    if theme:
        return (theme.fg_color[0], theme.fg_color[1]), (theme.hover_color[0], theme.hover_color[1])
    return ctk.ThemeManager.theme["CTkButton"]["fg_color"], ctk.ThemeManager.theme["CTkButton"]["hover_color"]

class Tooltip:
    """Shows `text` under a widget after the pointer rests on it. Empty text shows nothing."""

    DELAY_MS = 500

    def __init__(self, widget, text=""):
        self.widget = widget
        self.text = text
        self._window = None
        self._pending = None
        widget.bind("<Enter>", self._schedule, add="+")
        widget.bind("<Leave>", self._hide, add="+")

    def _schedule(self, event=None):
        self._pending = self.widget.after(self.DELAY_MS, self._show)

    def _show(self):
        self._pending = None
        if self._window is not None or not self.text:
            return
        x = self.widget.winfo_rootx() + 25
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 5
        self._window = ctk.CTkToplevel(self.widget)
        self._window.wm_overrideredirect(True)
        self._window.wm_geometry(f"+{x}+{y}")
        ctk.CTkLabel(self._window, text=self.text, fg_color=("#f0f0f0", "#2b2b2b"), corner_radius=5, padx=8, pady=4).pack()

    def _hide(self, event=None):
        if self._pending is not None:
            self.widget.after_cancel(self._pending)
            self._pending = None
        if self._window is not None:
            self._window.destroy()
            self._window = None

class ContextMenu(tkinter.Menu):
    """Right-click menu; bind `show` to <Button-3>."""

    def __init__(self, master, **kwargs):
        super().__init__(master, tearoff=0, **kwargs)

    def show(self, event):
        try:
            self.tk_popup(event.x_root, event.y_root)
        finally:
            self.grab_release()

class ModalDialog(ctk.CTkToplevel):
    """
    Modal window centred on its master, using the window manager's own title
    bar. Registers itself as `master.active_toplevel` while open.
    """

    def __init__(self, master, title, width, height):
        super().__init__(master)
        self.title(title)
        self.transient(master)
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.content_frame = ctk.CTkFrame(self, corner_radius=0)
        self.content_frame.grid(row=0, column=0, sticky="nsew")

        if hasattr(master, 'active_toplevel'):
            master.active_toplevel = self

        self.update_idletasks()
        x = master.winfo_x() + (master.winfo_width() - width) // 2
        y = master.winfo_y() + (master.winfo_height() - height) // 2
        self.geometry(f"{width}x{height}+{x}+{y}")

    def add_ok_button(self, row, theme_colors=None, **grid_options):
        ok_fg, ok_hover = themed_button_colors(theme_colors)
        ok_button = ctk.CTkButton(self.content_frame, text="OK", command=self.destroy, width=100, fg_color=ok_fg, hover_color=ok_hover)
        ok_button.grid(row=row, column=0, **grid_options)
        self.bind("<Escape>", lambda e: self.destroy())
        self.bind("<Return>", lambda e: ok_button.invoke())
        self.after(100, ok_button.focus_force)
        return ok_button

    def run(self):
        self.grab_set()
        self.master.wait_window(self)

    def destroy(self):
        if getattr(self.master, 'active_toplevel', None) is self:
            self.master.active_toplevel = None
        super().destroy()

class MessageDialog(ModalDialog):
    def __init__(self, master, title, message):
        super().__init__(master, title, width=400, height=160)
        self.content_frame.grid_columnconfigure(0, weight=1)
        self.content_frame.grid_rowconfigure(0, weight=1)

        ctk.CTkLabel(self.content_frame, text=message, wraplength=350).grid(row=0, column=0, padx=20, pady=20, sticky="ew")
        self.add_ok_button(1, getattr(master, 'theme_colors', None), padx=20, pady=(0, 20))
        self.run()

class AboutDialog(ModalDialog):
    def __init__(self, master, title_text, desc_text, capabilities, footer_text, theme_colors=None):
        super().__init__(master, "About", width=380, height=320)
        self.content_frame.columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self.content_frame,
            text=title_text,
            font=ctk.CTkFont(family="Segoe UI", size=16, weight="bold"),
            wraplength=340,
            justify="center"
        ).grid(row=0, column=0, padx=10, pady=(15, 0), sticky="ew")

        ctk.CTkLabel(
            self.content_frame,
            text=desc_text,
            font=ctk.CTkFont(family="Segoe UI", size=11),
            wraplength=330,
            justify="center",
            text_color=("gray20", "gray80")
        ).grid(row=1, column=0, padx=10, pady=(5, 10), sticky="ew")

        features_frame = ctk.CTkFrame(self.content_frame, fg_color=("gray95", "gray15"), corner_radius=0)
        features_frame.grid(row=2, column=0, pady=(0, 10), sticky="ew")
        features_frame.columnconfigure(1, weight=1)

        check_color = (theme_colors.fg_color[0], theme_colors.fg_color[1]) if theme_colors else ("#2a9d8f", "#2ECC71")
        for i, feature in enumerate(capabilities):
            ctk.CTkLabel(features_frame, text="✓", font=ctk.CTkFont(size=12, weight="bold"), text_color=check_color, width=15).grid(row=i, column=0, sticky="nw", padx=(15, 8), pady=4)
            ctk.CTkLabel(features_frame, text=feature, font=ctk.CTkFont(family="Segoe UI", size=11), wraplength=300, justify="left", anchor="w").grid(row=i, column=1, sticky="ew", pady=4)

        ctk.CTkLabel(
            self.content_frame,
            text=footer_text,
            font=ctk.CTkFont(family="Segoe UI", size=10, slant="italic"),
            text_color=("gray40", "gray60")
        ).grid(row=3, column=0, pady=(2, 0), sticky="ew")

        self.add_ok_button(4, theme_colors, pady=(10, 15))
        self.run()
