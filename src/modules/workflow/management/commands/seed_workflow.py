from __future__ import annotations

from django.core.management.base import BaseCommand

from modules.workflow.seeds import seed_order_process


class Command(BaseCommand):
    help = "Create the order lifecycle process, states and declared transitions."

    def add_arguments(self, parser):
        parser.add_argument("--process", default=None, help="Process code (default: ORD).")

    def handle(self, *args, **options):
        process = seed_order_process(options["process"])
        self.stdout.write(
            self.style.SUCCESS(
                f"Workflow '{process.code}' ready: "
                f"states={process.states.count()}, "
                f"transitions={process.transitions.count()}"
            )
        )
