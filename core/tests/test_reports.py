from dataclasses import replace
from datetime import date
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase

from core.entities import Schedule, ScheduleItem
from core.services import directory, reports, schedules
from core.services.persistence import SERVANTS, DatabaseGateway, MemoryGateway
from core.services.store import EntityStore

REPORT_DAY = date(2024, 7, 28)


class ParticipationReportTests(TestCase):
    def setUp(self):
        self.store = EntityStore.load(MemoryGateway())

    def test_inactive_servant_still_appears_in_history(self):
        ana = self.store.get(SERVANTS, 1)
        directory.update_servant(self.store, replace(ana, active=False))
        schedules.add_schedule(
            self.store,
            Schedule(
                date="2024-07-28",
                items=[ScheduleItem(id=7, function_id=5, servant_id=1, shift_id=3)],
                published=True,
            ),
        )

        rows = reports.participation_rows(self.store, "2024-07-27", "2024-07-29")
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row["date"], REPORT_DAY)
        self.assertEqual(row["servant"].id, 1)
        self.assertFalse(row["servant"].active)
        self.assertEqual(row["function"].name, "Vocal")
        self.assertEqual(row["ministry"].name, "Louvor")

    def test_unassigned_and_dangling_items_are_skipped(self):
        schedules.add_schedule(
            self.store,
            Schedule(
                date=REPORT_DAY,
                items=(
                    ScheduleItem(id=1, function_id=1, servant_id=3),
                    ScheduleItem(id=2, function_id=2, servant_id=0),
                    ScheduleItem(id=3, function_id=4, servant_id=404),
                    ScheduleItem(id=4, function_id=99, servant_id=2),
                ),
            ),
        )
        rows = reports.participation_rows(self.store, REPORT_DAY, REPORT_DAY)
        self.assertEqual([row["servant"].id for row in rows], [3])

    def test_servant_rows(self):
        schedules.add_schedule(
            self.store,
            Schedule(
                date=REPORT_DAY,
                items=(ScheduleItem(id=1, function_id=5, servant_id=1), ScheduleItem(id=2, function_id=10, servant_id=1)),
            ),
        )
        schedules.add_schedule(
            self.store, Schedule(date=date(2024, 8, 4), items=(ScheduleItem(id=3, function_id=5, servant_id=2),))
        )
        rows = reports.servant_rows(self.store, 1, "2024-07-01", "2024-08-31")
        self.assertEqual([row["function"].name for row in rows], ["Vocal", "Violão"])
        self.assertTrue(all(row["date"] == REPORT_DAY for row in rows))

    def test_servant_rows_keep_items_with_unknown_function(self):
        schedules.add_schedule(
            self.store, Schedule(date=REPORT_DAY, items=(ScheduleItem(id=1, function_id=99, servant_id=1),))
        )
        rows = reports.servant_rows(self.store, 1, REPORT_DAY, REPORT_DAY)
        self.assertEqual(rows, [{"date": REPORT_DAY, "ministry": None, "function": None}])
        self.assertEqual(reports.label(rows[0]["function"]), "N/A")

    def test_ministry_participation_counts(self):
        for day, pk in ((date(2024, 7, 21), 1), (REPORT_DAY, 2)):
            schedules.add_schedule(
                self.store,
                Schedule(
                    date=day,
                    items=(ScheduleItem(id=pk * 10, function_id=5, servant_id=1),
                           ScheduleItem(id=pk * 10 + 1, function_id=11, servant_id=5)),
                ),
            )
        counts = {
            (row["ministry"].name, row["servant"]): row["participations"]
            for row in reports.ministry_participation(self.store, "2024-07-01", "2024-07-31")
        }
        self.assertEqual(counts, {("Louvor", "Ana Silva"): 2, ("Recepção", "Eduarda Lima"): 2})

    def test_range_outside_schedules_is_empty(self):
        self.assertEqual(reports.participation_rows(self.store, "1999-01-01", "1999-12-31"), [])


class ParticipationReportCommandTests(TestCase):
    def setUp(self):
        store = EntityStore.load(DatabaseGateway())
        schedules.add_schedule(
            store, Schedule(date=REPORT_DAY, items=(ScheduleItem(id=1, function_id=5, servant_id=1, shift_id=3),))
        )

    def test_prints_period_rows(self):
        out = StringIO()
        call_command("participation_report", "--start", "2024-07-28", "--end", "2024-07-28", stdout=out)
        self.assertIn("2024-07-28\tLouvor\tVocal\tAna Silva", out.getvalue())

    def test_prints_ministry_counts(self):
        out = StringIO()
        call_command(
            "participation_report", "--start", "2024-07-01", "--end", "2024-07-31", "--by-ministry", stdout=out
        )
        self.assertIn("Louvor\tAna Silva\t1", out.getvalue())

    def test_servant_zero_is_not_the_period_report(self):
        out = StringIO()
        call_command(
            "participation_report", "--start", "2024-07-28", "--end", "2024-07-28", "--servant-id", "0", stdout=out
        )
        self.assertNotIn("Ana Silva", out.getvalue())
        self.assertIn("0 linhas", out.getvalue())


class RemindersCommandTests(TestCase):
    def setUp(self):
        store = EntityStore.load(DatabaseGateway())
        schedules.add_schedule(
            store,
            Schedule(
                date=REPORT_DAY,
                items=(
                    ScheduleItem(id=1, function_id=5, servant_id=1, shift_id=3),
                    ScheduleItem(id=2, function_id=6, servant_id=0, shift_id=3),
                ),
            ),
        )

    def test_prints_one_line_per_servant(self):
        out = StringIO()
        call_command("reminders", "--start", "2024-07-28", "--end", "2024-07-28", stdout=out)
        self.assertIn("Ana Silva\t(11) 98765-4321\t2024-07-28 Vocal", out.getvalue())
        self.assertIn("1 servos com escala", out.getvalue())

    def test_bad_date_is_rejected(self):
        with self.assertRaises(CommandError):
            call_command("reminders", "--start", "28/07/2024", "--end", "2024-07-28")
