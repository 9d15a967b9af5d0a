"""Tkinter desktop app for text statistics and permutations."""

from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk

from analyzer import TextAnalyzer, sort_stats
from models import COUNT_FIELDS, AnalyzeOptions, InvalidArgumentError, SortKey, TextStats
from permutations import MAX_PRACTICAL_LENGTH, permutation_count, permutations
from utils import (
    export_stats,
    load_config,
    load_text_lines,
    most_common_letters,
    options_from_config,
    save_config,
    setup_logging,
    sort_key_from_config,
)

COLUMN_TITLES = {
    "word_count": "Words",
    "letter_count": "Letters",
    "character_count": "Characters",
    "symbol_count": "Symbols",
    "space_count": "Spaces",
    "capital_count": "Capitals",
    "lower_count": "Lower",
    "digit_count": "Digits",
}


class TextTallyApp(tk.Tk):
    """Desktop UI for analyzing text files and permuting short words."""

    def __init__(self) -> None:
        super().__init__()
        setup_logging()
        self.logger = logging.getLogger(__name__)

        self.title("Text Tally")
        self.geometry("1200x720")
        self.minsize(960, 600)

        self.analyzer = TextAnalyzer()
        self.records: list[TextStats] = []
        self.selected_paths: list[str] = []
        self.worker_thread: threading.Thread | None = None
        self.worker_queue: queue.Queue[tuple] = queue.Queue()
        self.is_analyzing = False

        self.config_data = load_config()
        self.options = options_from_config(self.config_data)
        self._build_vars()
        self._build_ui()
        self.after(100, self._poll_worker_queue)

    def _build_vars(self) -> None:
        self.sort_key_var = tk.StringVar(value=sort_key_from_config(self.config_data).name)
        self.descending_var = tk.BooleanVar(value=False)
        self.permute_var = tk.StringVar(value="")
        self.letters_var = tk.StringVar(value="")
        self.status_var = tk.StringVar(value="Add text files to analyze.")

    def _build_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(2, weight=1)

        top = ttk.Frame(self, padding=8)
        top.grid(row=0, column=0, sticky="ew")
        top.columnconfigure(0, weight=1)
        self.files_label = ttk.Label(top, text="No files selected.")
        self.files_label.grid(row=0, column=0, sticky="w", padx=(0, 8))
        ttk.Button(top, text="Add Files", command=self._browse_files).grid(row=0, column=1, padx=(0, 8))
        ttk.Button(top, text="Clear", command=self._clear_all).grid(row=0, column=2, padx=(0, 8))
        self.analyze_button = ttk.Button(top, text="Analyze", command=self._start_analysis)
        self.analyze_button.grid(row=0, column=3)

        options = ttk.LabelFrame(self, text="Sorting", padding=8)
        options.grid(row=1, column=0, sticky="ew", padx=8, pady=(0, 6))
        ttk.Label(options, text="Sort by:").grid(row=0, column=0, sticky="w", padx=(0, 8))
        sort_box = ttk.Combobox(
            options,
            textvariable=self.sort_key_var,
            values=[key.name for key in SortKey],
            state="readonly",
            width=12,
        )
        sort_box.grid(row=0, column=1, sticky="w", padx=(0, 12))
        sort_box.bind("<<ComboboxSelected>>", self._on_sort_changed)
        ttk.Checkbutton(
            options, text="Descending", variable=self.descending_var, command=self._render_records
        ).grid(row=0, column=2, sticky="w")

        middle = ttk.Panedwindow(self, orient=tk.HORIZONTAL)
        middle.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 6))

        results_frame = ttk.LabelFrame(middle, text="File Statistics", padding=8)
        results_frame.columnconfigure(0, weight=1)
        results_frame.rowconfigure(0, weight=1)
        self.results_tree = ttk.Treeview(
            results_frame,
            columns=("path", *COUNT_FIELDS),
            show="headings",
            height=16,
        )
        self.results_tree.heading("path", text="File")
        self.results_tree.column("path", width=260, anchor=tk.W)
        for name in COUNT_FIELDS:
            self.results_tree.heading(name, text=COLUMN_TITLES[name])
            self.results_tree.column(name, width=80, anchor=tk.E)
        tree_scroll = ttk.Scrollbar(results_frame, orient=tk.VERTICAL, command=self.results_tree.yview)
        self.results_tree.configure(yscrollcommand=tree_scroll.set)
        self.results_tree.grid(row=0, column=0, sticky="nsew")
        tree_scroll.grid(row=0, column=1, sticky="ns")
        self.results_tree.bind("<<TreeviewSelect>>", self._on_record_selected)

        letters_row = ttk.Frame(results_frame)
        letters_row.grid(row=1, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        ttk.Label(letters_row, text="Most common letters:").grid(row=0, column=0, sticky="w", padx=(0, 8))
        ttk.Label(letters_row, textvariable=self.letters_var).grid(row=0, column=1, sticky="w")

        permute_frame = ttk.LabelFrame(middle, text="Permutations", padding=8)
        permute_frame.columnconfigure(0, weight=1)
        permute_frame.rowconfigure(1, weight=1)
        entry_row = ttk.Frame(permute_frame)
        entry_row.grid(row=0, column=0, sticky="ew")
        entry_row.columnconfigure(0, weight=1)
        ttk.Entry(entry_row, textvariable=self.permute_var).grid(row=0, column=0, sticky="ew", padx=(0, 8))
        ttk.Button(entry_row, text="Permute", command=self._permute_clicked).grid(row=0, column=1)
        self.permute_listbox = tk.Listbox(permute_frame, height=16, exportselection=False)
        self.permute_listbox.grid(row=1, column=0, sticky="nsew", pady=(8, 0))

        middle.add(results_frame, weight=3)
        middle.add(permute_frame, weight=1)

        bottom = ttk.Frame(self, padding=8)
        bottom.grid(row=3, column=0, sticky="ew")
        bottom.columnconfigure(0, weight=1)
        ttk.Button(bottom, text="Save Results", command=self._save_results).grid(row=0, column=1)

        status_row = ttk.Frame(self, padding=(8, 0, 8, 8))
        status_row.grid(row=4, column=0, sticky="ew")
        status_row.columnconfigure(1, weight=1)
        ttk.Label(status_row, text="Status:").grid(row=0, column=0, sticky="w", padx=(0, 8))
        ttk.Label(status_row, textvariable=self.status_var).grid(row=0, column=1, sticky="w")
        self.progress = ttk.Progressbar(status_row, orient=tk.HORIZONTAL, length=220, mode="determinate", maximum=100)
        self.progress.grid(row=0, column=2, sticky="e")

    def _browse_files(self) -> None:
        paths = filedialog.askopenfilenames(
            title="Select text files",
            initialdir=self.config_data.get("last_directory") or None,
            filetypes=[("Text files", "*.txt"), ("All files", "*.*")],
        )
        if not paths:
            return
        for path in paths:
            resolved = str(Path(path).resolve())
            if resolved not in self.selected_paths:
                self.selected_paths.append(resolved)
        self.config_data["last_directory"] = str(Path(paths[0]).parent)
        self.files_label.configure(text=f"{len(self.selected_paths)} file(s) selected.")

    def _start_analysis(self) -> None:
        if self.is_analyzing:
            return
        if not self.selected_paths:
            messagebox.showerror("No files", "Please add at least one text file first.")
            return

        self.is_analyzing = True
        self.progress.configure(value=0)
        self.status_var.set("Analyzing files in background...")
        self.analyze_button.configure(state=tk.DISABLED)

        self.worker_thread = threading.Thread(
            target=self._analyze_worker,
            args=(list(self.selected_paths), self._current_options()),
            daemon=True,
        )
        self.worker_thread.start()

    def _analyze_worker(self, paths: list[str], options: AnalyzeOptions) -> None:
        records: list[TextStats] = []
        try:
            for idx, path in enumerate(paths, start=1):
                records.append(self.analyzer.analyze_file(path, options))
                self.worker_queue.put(("progress", idx / len(paths)))
            self.worker_queue.put(("analysis_done", records))
        except Exception as exc:
            self.logger.exception("Failed analyzing files")
            self.worker_queue.put(("error", f"Failed to analyze files: {exc}"))

    def _poll_worker_queue(self) -> None:
        try:
            while True:
                event = self.worker_queue.get_nowait()
                kind = event[0]
                if kind == "progress":
                    pct = max(0.0, min(float(event[1]), 1.0))
                    self.progress.configure(value=int(pct * 100))
                elif kind == "analysis_done":
                    self._handle_analysis_done(event[1])
                elif kind == "error":
                    self._handle_worker_error(event[1])
        except queue.Empty:
            pass
        finally:
            self.after(100, self._poll_worker_queue)

    def _handle_analysis_done(self, records: list[TextStats]) -> None:
        self.is_analyzing = False
        self.analyze_button.configure(state=tk.NORMAL)
        self.progress.configure(value=100)
        self.records = records
        self._render_records()
        self.status_var.set(f"Analyzed {len(records)} file(s).")
        self._persist_config()

    def _handle_worker_error(self, message: str) -> None:
        self.is_analyzing = False
        self.analyze_button.configure(state=tk.NORMAL)
        self.progress.configure(value=0)
        self.status_var.set("Analysis failed.")
        messagebox.showerror("Analysis error", message)

    def _current_sort_key(self) -> SortKey:
        return SortKey.parse(self.sort_key_var.get())

    def _current_options(self) -> AnalyzeOptions:
        return AnalyzeOptions(
            encoding=self.options.encoding,
            max_lines=self.options.max_lines,
        )

    def _persist_config(self) -> None:
        self.config_data["sort_key"] = self._current_sort_key().name
        save_config(self.config_data)

    def _on_sort_changed(self, _event: object) -> None:
        self._render_records()
        self._persist_config()

    def _render_records(self) -> None:
        self.results_tree.delete(*self.results_tree.get_children())
        self.letters_var.set("")
        ordered = sort_stats(self.records, key=self._current_sort_key(), reverse=self.descending_var.get())
        for record in ordered:
            self.results_tree.insert(
                "",
                tk.END,
                iid=record.path,
                values=(record.path, *(getattr(record, name) for name in COUNT_FIELDS)),
            )

    def _on_record_selected(self, _event: object) -> None:
        selected = self.results_tree.selection()
        if not selected:
            return
        try:
            lines = load_text_lines(selected[0], encoding=self.options.encoding)
            letters = most_common_letters(lines, amount=5)
        except Exception as exc:
            self.logger.exception("Letter frequency failed")
            self.letters_var.set(f"unavailable ({exc})")
            return
        self.letters_var.set(" ".join(letters) if letters else "none")

    def _permute_clicked(self) -> None:
        word = self.permute_var.get().strip()
        self.permute_listbox.delete(0, tk.END)
        if len(word) > MAX_PRACTICAL_LENGTH:
            proceed = messagebox.askyesno(
                "Long input",
                f"'{word}' has {permutation_count(word)} permutations. Continue?",
            )
            if not proceed:
                return
        try:
            results = sorted(permutations(word))
        except InvalidArgumentError as exc:
            messagebox.showinfo("Empty input", str(exc))
            return
        for item in results:
            self.permute_listbox.insert(tk.END, item)
        self.status_var.set(f"Generated {len(results)} permutation(s).")

    def _save_results(self) -> None:
        if not self.records:
            messagebox.showinfo("No results", "Analyze at least one file before exporting.")
            return

        json_path_str = filedialog.asksaveasfilename(
            title="Save results JSON (CSV will be saved alongside)",
            defaultextension=".json",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if not json_path_str:
            return

        json_path = Path(json_path_str)
        csv_path = json_path.with_suffix(".csv")
        sort_key = self._current_sort_key()

        try:
            export_stats(
                json_path=json_path,
                csv_path=csv_path,
                records=sort_stats(self.records, key=sort_key, reverse=self.descending_var.get()),
                sort_key=sort_key,
            )
            self.status_var.set(f"Saved: {json_path.name} and {csv_path.name}")
            messagebox.showinfo("Export complete", f"Saved:\n{json_path}\n{csv_path}")
        except Exception as exc:
            self.logger.exception("Export failed")
            messagebox.showerror("Export error", f"Could not save results: {exc}")

    def _clear_all(self) -> None:
        self.selected_paths = []
        self.records = []
        self.results_tree.delete(*self.results_tree.get_children())
        self.permute_listbox.delete(0, tk.END)
        self.letters_var.set("")
        self.files_label.configure(text="No files selected.")
        self.progress.configure(value=0)
        self.status_var.set("Cleared files and results.")


def main() -> None:
    app = TextTallyApp()
    app.mainloop()


if __name__ == "__main__":
    main()
