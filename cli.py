"""
ER patient queue command line.
Run: er-queue <command>   (or: python cli.py <command>)

Each command loads the state files, runs one store operation and saves again
if the operation changed anything. ``shell`` runs the interactive menu and
saves on exit.
"""

import argparse
import logging
import os
import sys
from typing import Iterable, List, Optional

from dotenv import load_dotenv

# Load .env from the working directory before any config imports
load_dotenv(os.path.join(os.getcwd(), ".env"))

from rich.console import Console
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from config import MAX_PRIORITY, MIN_PRIORITY, get_log_level
from models import InvalidPatientError, PatientRecord
from store import PatientStore

logger = logging.getLogger(__name__)
console = Console()


# --- Output helpers ---

def print_error(message):
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message):
    console.print(f"[bold green]OK:[/bold green] {message}")


def patient_table(title: str, records: Iterable[PatientRecord]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Age", justify="right")
    table.add_column("Priority", justify="right")
    table.add_column("Contact")
    table.add_column("ID", style="dim")
    for i, r in enumerate(records, start=1):
        style = "bold red" if r.priority >= 8 else None
        table.add_row(str(i), r.name, str(r.age), str(r.priority), r.contact, r.patient_id, style=style)
    return table


def save_or_report(store: PatientStore) -> int:
    if store.save():
        return 0
    print_error(f"State could not be saved to {store.waiting_path} / {store.treated_path}")
    return 1


def show_records(title: str, records: List[PatientRecord], empty_message: str) -> None:
    if not records:
        console.print(f"[yellow]{empty_message}[/yellow]")
        return
    console.print(patient_table(title, records))


# --- Commands ---

def handle_add(store: PatientStore, args) -> int:
    try:
        record = store.add_patient(args.name, args.age, args.priority, args.contact)
    except InvalidPatientError as e:
        print_error(f"Invalid patient: {e}")
        return 2
    print_success(f"Added: {record.name} Sev={record.priority}")
    return save_or_report(store)


def handle_serve(store: PatientStore, args) -> int:
    record = store.serve_next()
    if record is None:
        console.print("[yellow]No patients waiting[/yellow]")
        return 0
    print_success(f"Treating: {record.name} Sev={record.priority}")
    return save_or_report(store)


def handle_list(store: PatientStore, args) -> int:
    show_records("Waiting Patients", store.list_waiting(), "No patients waiting")
    return 0


def handle_search(store: PatientStore, args) -> int:
    show_records(f"Patients named '{args.name.strip()}'", store.search_by_name(args.name), "No match found")
    return 0


def handle_history(store: PatientStore, args) -> int:
    records = store.served()
    if args.limit is not None:
        records = records[: args.limit]
    show_records("Treated Patients (most recent first)", records, "No patients treated yet")
    return 0


def run_shell(store: PatientStore, args) -> int:
    """Interactive menu. Exit saves state."""
    menu = "1) Add Patient\n2) Treat Next\n3) View All\n4) Search\n5) History\n6) Exit"
    while True:
        console.print("\n[bold cyan]====== ER Patient Management ======[/bold cyan]")
        console.print(menu)
        try:
            choice = Prompt.ask("Choose", choices=["1", "2", "3", "4", "5", "6"])
        except (EOFError, KeyboardInterrupt):
            choice = "6"
        if choice == "1":
            name = Prompt.ask("Name")
            age = IntPrompt.ask("Age")
            priority = IntPrompt.ask(f"Severity ({MIN_PRIORITY}-{MAX_PRIORITY})")
            contact = Prompt.ask("Contact", default="")
            try:
                record = store.add_patient(name, age, priority, contact)
                print_success(f"Added: {record.name} Sev={record.priority}")
            except InvalidPatientError as e:
                print_error(f"Invalid patient: {e}")
        elif choice == "2":
            record = store.serve_next()
            if record is None:
                console.print("[yellow]No patients waiting[/yellow]")
            else:
                print_success(f"Treating: {record.name} Sev={record.priority}")
        elif choice == "3":
            show_records("Waiting Patients", store.list_waiting(), "No patients waiting")
        elif choice == "4":
            name = Prompt.ask("Enter name")
            show_records(f"Patients named '{name.strip()}'", store.search_by_name(name), "No match found")
        elif choice == "5":
            show_records("Treated Patients (most recent first)", store.served(), "No patients treated yet")
        else:
            if not store.save():
                print_error("State could not be saved")
                return 1
            print_success("State saved.")
            return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="er-queue", description="Emergency room patient queue")
    parser.add_argument("--waiting-file", help="Path of the waiting patients file")
    parser.add_argument("--treated-file", help="Path of the treated patients file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_add = sub.add_parser("add", help="Register a waiting patient")
    p_add.add_argument("--name", required=True)
    p_add.add_argument("--age", type=int, required=True)
    p_add.add_argument("--priority", type=int, required=True, help=f"{MIN_PRIORITY} (low) to {MAX_PRIORITY} (critical)")
    p_add.add_argument("--contact", default="")
    p_add.set_defaults(func=handle_add)

    sub.add_parser("serve", help="Treat the next patient").set_defaults(func=handle_serve)
    sub.add_parser("list", help="List waiting patients in treatment order").set_defaults(func=handle_list)

    p_search = sub.add_parser("search", help="Find waiting patients by exact name")
    p_search.add_argument("name")
    p_search.set_defaults(func=handle_search)

    p_hist = sub.add_parser("history", help="List treated patients, most recent first")
    p_hist.add_argument("--limit", type=int)
    p_hist.set_defaults(func=handle_history)

    sub.add_parser("shell", help="Interactive menu; saves on exit").set_defaults(func=run_shell)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=get_log_level(), format="%(asctime)s %(levelname)s %(message)s")
    args = build_parser().parse_args(argv)
    store = PatientStore(args.waiting_file, args.treated_file)
    if not store.load():
        # Running on an empty store would overwrite the files on the next save
        print_error(f"State could not be loaded from {store.waiting_path} / {store.treated_path}")
        return 1
    return args.func(store, args)


if __name__ == "__main__":
    sys.exit(main())
