from datetime import date

from django.core.management.base import BaseCommand, CommandError

from core.services.schedules import schedules_between, servant_duties
from core.services.store import EntityStore


class Command(BaseCommand):
    help = "List each scheduled servant with phone and duties for a date range."

    def add_arguments(self, parser):
        parser.add_argument("--start", type=str, required=True)
        parser.add_argument("--end", type=str, required=True)

    def handle(self, *args, **options):
        try:
            start = date.fromisoformat(options["start"])
            end = date.fromisoformat(options["end"])
        except ValueError:
            raise CommandError("Use datas no formato AAAA-MM-DD.")

        store = EntityStore.load()
        entries = servant_duties(store, schedules_between(store, start, end))
        for entry in entries:
            duties = "; ".join(f"{day.isoformat()} {function.name}" for day, function in entry["duties"])
            self.stdout.write(f"{entry['servant'].name}\t{entry['servant'].phone}\t{duties}")
        self.stdout.write(self.style.SUCCESS(f"{len(entries)} servos com escala de {start} a {end}"))
