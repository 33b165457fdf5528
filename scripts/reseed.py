#!/usr/bin/env python3
"""
Baixa novamente o documento de usuarios a partir da URL de seed.

Uso:
  python scripts/reseed.py [--url https://dummyjson.com/users] [--data-file data/users.json]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Garante que o pacote users_api seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from users_api.core.config import get_settings  # noqa: E402
from users_api.core.log import configure_logging  # noqa: E402
from users_api.repositories.json_storage import JsonDocumentStore  # noqa: E402
from users_api.services.seed_service import SeedService  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Re-fetch the seed users document")
    ap.add_argument("--url", default=settings.seed_url, help="Seed URL (default: SEED_URL)")
    ap.add_argument("--data-file", default=str(settings.data_file), help="Target file (default: DATA_FILE)")
    ap.add_argument("--timeout", type=float, default=settings.seed_timeout_seconds, help="Timeout em segundos")
    args = ap.parse_args(argv)

    configure_logging(settings.log_level)
    service = SeedService(JsonDocumentStore(args.data_file), args.url, timeout=args.timeout)
    result = service.load_seed()
    if not result.ok:
        sys.stderr.write(f"Erro: {result.error}\n")
        return 1
    print("OK: seed salvo")
    print(f"  URL: {result.url}")
    print(f"  Arquivo: {args.data_file}")
    print(f"  Bytes: {result.bytes_written}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
