import sys

from src.documents.sync import run_sync

# python -m src.documents [document-name ...]
if __name__ == "__main__":
    names = sys.argv[1:] or None
    summary = run_sync(document_names=names)
    print(summary)
    sys.exit(1 if summary.failed_count else 0)
