from datetime import date

from django.core.management.base import BaseCommand, CommandError

from core.services.reports import label, ministry_participation, participation_rows, servant_rows
from core.services.store import EntityStore


class Command(BaseCommand):
    help = "Print servant participation rows for a date range."

    def add_arguments(self, parser):
        parser.add_argument("--start", type=str, required=True)
        parser.add_argument("--end", type=str, required=True)
        parser.add_argument("--servant-id", type=int)
        parser.add_argument("--by-ministry", action="store_true")

    def handle(self, *args, **options):
        try:
            start = date.fromisoformat(options["start"])
            end = date.fromisoformat(options["end"])
        except ValueError:
            raise CommandError("Use datas no formato AAAA-MM-DD.")

        store = EntityStore.load()
        servant_id = options.get("servant_id")
        if options["by_ministry"]:
            rows = ministry_participation(store, start, end)
            lines = [f"{row['ministry'].name}\t{row['servant']}\t{row['participations']}" for row in rows]
        elif servant_id is not None:
            rows = servant_rows(store, servant_id, start, end)
            lines = [f"{row['date'].isoformat()}\t{label(row['ministry'])}\t{label(row['function'])}" for row in rows]
        else:
            rows = participation_rows(store, start, end)
            lines = [
                f"{row['date'].isoformat()}\t{row['ministry'].name}\t{row['function'].name}\t{row['servant'].name}"
                for row in rows
            ]

        for line in lines:
            self.stdout.write(line)
        self.stdout.write(self.style.SUCCESS(f"{len(lines)} linhas de {start} a {end}"))
