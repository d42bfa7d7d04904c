"""
import_vocabulary – bulk-add ``term | meaning | example`` lines to a section.

Usage:
$ python manage.py import_vocabulary idioms.txt --section Idioms --create --user alice
$ cat words.txt | python manage.py import_vocabulary - --section "Phrasal Verbs"
"""
from __future__ import annotations

import sys
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from vocabulary import services
from vocabulary.errors import VocabularyError

from ._common import add_store_arguments, store_from_options


class Command(BaseCommand):
    help = "Bulk-import vocabulary entries (one 'term | meaning | example' per line) into a section."

    def add_arguments(self, parser):
        parser.add_argument("file", help="text file to read, or - for stdin")
        parser.add_argument("--section", required=True, help="section name (case-insensitive)")
        parser.add_argument("--create", action="store_true",
                            help="create the section when it does not exist yet")
        add_store_arguments(parser)

    def handle(self, *args, **options):
        text = self._read(options["file"])
        try:
            store, _user = store_from_options(options)
            section = services.find_section_by_name(store, options["section"])
            if section is None:
                if not options["create"]:
                    raise CommandError(
                        f"No section named {options['section']!r} (pass --create to add it)"
                    )
                section = services.create_section(store, options["section"])
                self.stdout.write(f'Section "{section.name}" created')
            section, rows = services.add_entries(store, section.id, text)
        except VocabularyError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(f'Added {len(rows)} entries to "{section.name}"'))

    @staticmethod
    def _read(name: str) -> str:
        if name == "-":
            return sys.stdin.read()
        try:
            return Path(name).read_text(encoding="utf-8")
        except OSError as exc:
            raise CommandError(f"Cannot read {name}: {exc}") from exc
