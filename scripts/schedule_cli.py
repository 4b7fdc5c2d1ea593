#!/usr/bin/env python3
"""Interactive console for the appointment scheduling service."""

import sys
from datetime import date, datetime, timedelta

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

MENU = """[bold]1.[/bold] Setup doctor calendar
[bold]2.[/bold] Generate time slots
[bold]3.[/bold] Submit appointment request
[bold]4.[/bold] Process all requests
[bold]5.[/bold] View available slots
[bold]6.[/bold] View confirmed appointments
[bold]7.[/bold] Cancel appointment
[bold]8.[/bold] Reschedule appointment
[bold]9.[/bold] Run demo
[bold]0.[/bold] Exit"""


class ScheduleCLI:
    """Menu-driven client for the scheduling API."""

    def __init__(self, base_url: str = "http://localhost:9001"):
        """Initialize schedule CLI."""
        self.base_url = base_url
        self.console = Console()
        self.client = httpx.Client(base_url=base_url, timeout=30.0)

    def start(self) -> None:
        """Start the interactive menu loop."""
        self.console.print(
            Panel.fit("[bold blue]🏥 Appointment Scheduling System[/bold blue]", border_style="blue")
        )

        if not self._test_connection():
            self.console.print(f"[red]❌ Cannot connect to the service at {self.base_url}.[/red]")
            return

        actions = {
            "1": self._setup_calendar,
            "2": self._generate_slots,
            "3": self._submit_request,
            "4": self._process_requests,
            "5": self._show_available_slots,
            "6": self._show_appointments,
            "7": self._cancel_appointment,
            "8": self._reschedule_appointment,
            "9": self._run_demo,
        }

        try:
            while True:
                self.console.print(Panel(MENU, title="[cyan]Main Menu[/cyan]", border_style="cyan"))
                choice = Prompt.ask("Select an option", choices=[*actions, "0"], default="0")
                if choice == "0":
                    break
                actions[choice]()
        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]👋 Goodbye![/yellow]")
            self.client.close()

    def _test_connection(self) -> bool:
        try:
            return self.client.get("/health").status_code == 200
        except httpx.HTTPError:
            return False

    def _request(self, method: str, path: str, **kwargs) -> dict | list | None:
        """Send a request, printing API errors instead of raising."""
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            self.console.print(f"[red]❌ Connection error: {e}[/red]")
            return None

        if response.is_success:
            return response.json()

        detail = response.json().get("detail", response.text) if response.content else response.text
        self.console.print(f"[red]❌ {response.status_code}: {detail}[/red]")
        return None

    def _setup_calendar(self) -> None:
        doctor = Prompt.ask("Doctor name", default="Dr. Smith")
        duration = IntPrompt.ask("Slot duration (minutes)", default=30)
        data = self._request("PUT", "/calendar", json={"doctor_name": doctor, "slot_duration_minutes": duration})
        if data:
            self.console.print(f"[green]✅ Calendar created for {data['doctor_name']}[/green]")

    def _generate_slots(self) -> None:
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        start = Prompt.ask("Start date (YYYY-MM-DD)", default=tomorrow)
        weeks = IntPrompt.ask("Number of weeks", default=1)
        data = self._request("POST", "/slots/generate", json={"start_date": start, "weeks": weeks})
        if data:
            self.console.print(f"[green]✅ Generated {data['created']} time slots[/green]")

    def _submit_request(self) -> None:
        default_time = (datetime.now() + timedelta(days=1)).replace(hour=10, minute=0, second=0, microsecond=0)
        payload = {
            "patient_id": Prompt.ask("Patient ID"),
            "patient_name": Prompt.ask("Patient name"),
            "patient_contact": Prompt.ask("Patient contact"),
            "priority": Prompt.ask("Priority", choices=["routine", "urgent", "emergency"], default="routine"),
            "preferred_time": Prompt.ask("Preferred time (YYYY-MM-DDTHH:MM)", default=default_time.isoformat()),
            "reason": Prompt.ask("Reason for visit"),
            "flexibility_minutes": IntPrompt.ask("Flexibility (minutes)", default=60),
        }
        data = self._request("POST", "/requests", json=payload)
        if data:
            self.console.print(f"[green]✅ Request queued ({data['pending']} pending)[/green]")

    def _process_requests(self) -> None:
        data = self._request("POST", "/schedule")
        if data:
            self._display_batch(data)

    def _run_demo(self) -> None:
        data = self._request("POST", "/demo")
        if data:
            self._display_batch(data)

    def _show_available_slots(self) -> None:
        slots = self._request("GET", "/slots/available")
        if slots is None:
            return
        if not slots:
            self.console.print("[yellow]No available slots.[/yellow]")
            return

        table = Table(title=f"Available slots ({len(slots)})")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Minutes", justify="right")
        for slot in slots[:20]:
            table.add_row(slot["start_time"], slot["end_time"], str(slot["duration_minutes"]))
        self.console.print(table)
        if len(slots) > 20:
            self.console.print(f"[dim]... and {len(slots) - 20} more[/dim]")

    def _show_appointments(self) -> None:
        appointments = self._request("GET", "/appointments")
        if appointments is None:
            return
        if not appointments:
            self.console.print("[yellow]No confirmed appointments.[/yellow]")
            return
        self._display_appointments(appointments, "Confirmed appointments")

    def _cancel_appointment(self) -> None:
        appointment_id = Prompt.ask("Appointment ID")
        data = self._request("DELETE", f"/appointments/{appointment_id}")
        if data:
            self.console.print(f"[green]✅ {data['message']}[/green]")

    def _reschedule_appointment(self) -> None:
        appointment_id = Prompt.ask("Appointment ID")
        new_time = Prompt.ask("New preferred time (YYYY-MM-DDTHH:MM)")
        flexibility = IntPrompt.ask("Flexibility (minutes)", default=60)
        data = self._request(
            "POST",
            f"/appointments/{appointment_id}/reschedule",
            json={"new_preferred_time": new_time, "flexibility_minutes": flexibility},
        )
        if data:
            color = "green" if data["success"] else "red"
            self.console.print(f"[{color}]{data['message']}[/{color}]")

    def _display_appointments(self, appointments: list[dict], title: str) -> None:
        table = Table(title=title)
        table.add_column("ID", style="dim")
        table.add_column("Time")
        table.add_column("Patient")
        table.add_column("Priority")
        table.add_column("Reason")
        for apt in appointments:
            table.add_row(apt["appointment_id"], apt["start_time"], apt["patient_name"], apt["priority"], apt["reason"])
        self.console.print(table)

    def _display_batch(self, data: dict) -> None:
        self.console.print(
            Panel(
                f"Total requests: {data['total_requests']}\n"
                f"Confirmed: {len(data['confirmed'])}\n"
                f"Failed: {len(data['failed'])}\n"
                f"Success rate: {data['success_rate']:.1f}%",
                title="[bold green]Scheduling Results[/bold green]",
                border_style="green",
            )
        )
        if data["confirmed"]:
            self._display_appointments(data["confirmed"], "Confirmed")
        for failure in data["failed"]:
            self.console.print(f"[red]❌ {failure.get('patient_name')}: {failure['message']}[/red]")


def main():
    """Main entry point for the schedule CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:9001"

    cli = ScheduleCLI(base_url)
    cli.start()


if __name__ == "__main__":
    main()
