from django.core.management.base import BaseCommand, CommandError

from core.services.persistence import COLLECTION_KEYS, get_gateway


class Command(BaseCommand):
    help = "Discard stored collections so the next load falls back to defaults."

    def add_arguments(self, parser):
        parser.add_argument("--key", action="append", dest="keys")

    def handle(self, *args, **options):
        keys = options.get("keys") or list(COLLECTION_KEYS)
        unknown = [key for key in keys if key not in COLLECTION_KEYS]
        if unknown:
            raise CommandError(f"Colecoes desconhecidas: {', '.join(unknown)}")
        gateway = get_gateway()
        for key in keys:
            gateway.discard(key)
            self.stdout.write(self.style.SUCCESS(f"{key}: descartada"))
