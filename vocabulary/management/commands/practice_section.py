# practice_section – print today's practice section, optionally completing one first
from __future__ import annotations

import random

from django.core.management.base import BaseCommand, CommandError

from vocabulary import services
from vocabulary.errors import VocabularyError
from vocabulary.practice.rotation import SectionRotation

from ._common import add_store_arguments, store_from_options


class Command(BaseCommand):
    help = "Pick the next vocabulary section to practice and list its entries."

    def add_arguments(self, parser):
        parser.add_argument("--complete", metavar="SECTION",
                            help="mark this section complete before picking (needs --user)")
        parser.add_argument("--seed", type=int, help="seed for a reproducible pick")
        add_store_arguments(parser)

    def handle(self, *args, **options):
        rng = random.Random(options["seed"]) if options["seed"] is not None else None
        try:
            store, user = store_from_options(options)
            rotation = SectionRotation(store, user=user, rng=rng)

            if options["complete"]:
                section = services.find_section_by_name(store, options["complete"])
                if section is None:
                    raise CommandError(f"No section named {options['complete']!r}")
                done = rotation.mark_complete(section)
                if done.created:
                    self.stdout.write(self.style.SUCCESS(
                        f'"{section.name}" has been marked as complete (cycle {done.record.cycle_number}).'
                    ))
                else:
                    self.stdout.write(f'"{section.name}" was already complete in cycle {done.record.cycle_number}.')
                selection = done.next
            else:
                selection = rotation.select_next()

            if selection.section is None:
                self.stdout.write("No sections yet. Create one and add some words first.")
                return
            entries = store.list_entries_by_section(selection.section.id)
        except VocabularyError as exc:
            raise CommandError(str(exc)) from exc

        if selection.notice:
            self.stdout.write(self.style.WARNING(selection.notice))
        header = f"Section: {selection.section.name}"
        if selection.cycle is not None:
            header += f"  (cycle {selection.cycle})"
        self.stdout.write(header)
        self.stdout.write(f"{len(entries)} words to review")
        for i, e in enumerate(entries, 1):
            self.stdout.write(f"  {i}. {e.term}: {e.meaning}")
            if e.example:
                self.stdout.write(f'     "{e.example}"')
