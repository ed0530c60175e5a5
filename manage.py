#!/usr/bin/env python3
"""
=============================================================================
VOCAB SWIPE - COMMANDER
=============================================================================
Single entry point for operator tasks.

Usage:
    python manage.py start                          # Launch the API (uvicorn)
    python manage.py sources list                   # Show sources and progress
    python manage.py sources import NAME FILE       # Import a JSON / .data word list
    python manage.py sources delete NAME            # Delete a source and its progress
    python manage.py doctor                         # Storage / state health check
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from vocab_swipe.adapters.persistence import data_file
from vocab_swipe.core.domain.exceptions import DomainError
from vocab_swipe.shared.config import settings
from vocab_swipe.shared.container import container

# Colors for terminal output
class Colors:
    HEADER = '\033[95m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

def log(msg, color=Colors.ENDC):
    print(f"{color}{msg}{Colors.ENDC}")

# --- COMMANDS ---

def start_server(host: str, port: int, reload: bool):
    """Launches the API in the foreground."""
    import uvicorn

    log(f"\n🚀 Vocab Swipe on http://{host}:{port}", Colors.HEADER)
    log(f"   Storage: {settings.STORAGE_BACKEND.value}  |  Policy: {settings.SELECTION_POLICY}", Colors.CYAN)
    uvicorn.run(
        "vocab_swipe.adapters.api.main:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )

async def list_sources():
    store = container.source_store()
    tracker = container.progress_tracker()

    sources, warnings = await store.list_sources_with_warnings()
    log(f"\n📚 {len(sources)} source(s)", Colors.HEADER)
    for source in sources:
        learned = tracker.learned_count(source.name)
        skipped = tracker.skipped_count(source.name)
        pct = round(learned / source.total_words * 100) if source.total_words else 0
        log(f"   {source.name:<30} {learned:>4}/{source.total_words:<4} learned ({pct}%)  {skipped} skipped")
    for warning in warnings:
        log(f"   ⚠️  {warning}", Colors.WARNING)

async def import_source(name: str, file_path: str, link: str = None):
    path = Path(file_path)
    if not path.is_file():
        log(f"❌ File not found: {path}", Colors.FAIL)
        sys.exit(1)

    try:
        parsed = data_file.loads(path.read_text(encoding="utf-8"))
    except data_file.DataFileError as e:
        log(f"❌ {path.name}: {e}", Colors.FAIL)
        sys.exit(1)

    store = container.source_store()
    source = await store.save_source(name, parsed.words, link or parsed.origin_link)
    container.progress_tracker().ensure_initialized(source.name)
    log(f"✅ Imported '{source.name}' ({source.total_words} words)", Colors.GREEN)

async def delete_source(name: str):
    session = container.study_session()
    await session.delete_source(name)
    log(f"🗑️  Deleted '{name}' and its progress.", Colors.GREEN)

async def doctor():
    """System health check."""
    log("\n🏥 Health Check", Colors.HEADER)
    ok = True

    store = container.source_store()
    if await store.health_check():
        log(f"   ✅ Source storage reachable ({settings.STORAGE_BACKEND.value}).", Colors.GREEN)
    else:
        log("   ❌ Source storage is NOT reachable.", Colors.FAIL)
        ok = False

    state_path = Path(settings.STATE_FILE)
    if state_path.exists():
        try:
            json.loads(state_path.read_text(encoding="utf-8"))
            log(f"   ✅ State file readable: {state_path}", Colors.GREEN)
        except (OSError, ValueError) as e:
            log(f"   ❌ State file unreadable: {e}", Colors.FAIL)
            ok = False
    else:
        log(f"   ℹ️  No state file yet ({state_path}); it is created on first progress.", Colors.CYAN)

    if ok:
        _, warnings = await store.list_sources_with_warnings()
        for warning in warnings:
            log(f"   ⚠️  {warning}", Colors.WARNING)

    return ok

# --- CLI ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vocab Swipe Commander")
    sub = parser.add_subparsers(dest="command", required=True)

    p_start = sub.add_parser("start", help="Launch the API server")
    p_start.add_argument("--host", default="0.0.0.0")
    p_start.add_argument("--port", type=int, default=8080)
    p_start.add_argument("--reload", action="store_true")

    p_sources = sub.add_parser("sources", help="Manage vocabulary sources")
    src_sub = p_sources.add_subparsers(dest="action", required=True)
    src_sub.add_parser("list", help="List sources with progress")
    p_import = src_sub.add_parser("import", help="Import a word list file")
    p_import.add_argument("name")
    p_import.add_argument("file")
    p_import.add_argument("--link", help="Origin URL stored with the source")
    p_delete = src_sub.add_parser("delete", help="Delete a source")
    p_delete.add_argument("name")

    sub.add_parser("doctor", help="Check storage and state health")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.command == "start":
        start_server(args.host, args.port, args.reload)
        return

    try:
        if args.command == "doctor":
            if not asyncio.run(doctor()):
                sys.exit(1)
        elif args.action == "list":
            asyncio.run(list_sources())
        elif args.action == "import":
            asyncio.run(import_source(args.name, args.file, args.link))
        elif args.action == "delete":
            asyncio.run(delete_source(args.name))
    except DomainError as e:
        log(f"❌ {e.message}", Colors.FAIL)
        sys.exit(1)

if __name__ == "__main__":
    main()
