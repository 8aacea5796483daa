import argparse
from pathlib import Path
import sys


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hn_sync.errors import DecodeError, EmptyStoreError
from hn_sync.ingest.item import COLUMNS, parse_sql_value
from hn_sync.storage.file import FileItemStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize a file store directory.")
    parser.add_argument("directory", help="File store directory")
    parser.add_argument("--tail", type=int, default=5, help="Rows to print from the end")
    args = parser.parse_args()

    store = FileItemStore(args.directory)
    try:
        cursor: int | None = store.last_known_id()
    except EmptyStoreError:
        cursor = None

    rows: list[dict[str, object]] = []
    bad = 0
    if store.items_path.exists():
        with store.items_path.open(encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                try:
                    rows.append(dict(zip(COLUMNS, parse_sql_value(line))))
                except DecodeError:
                    bad += 1

    print(f"cursor: {cursor if cursor is not None else 'empty'}")
    print(f"rows: {len(rows)} (unparseable: {bad})")
    if rows:
        ids = [int(row["id"]) for row in rows]
        print(f"id range: {min(ids)}..{max(ids)}")
    for row in rows[-args.tail :] if args.tail > 0 else []:
        print(f"{row['id']}\t{row['type']}\t{row['who']}\t{row['title']}")


if __name__ == "__main__":
    main()
