# seed_store.py
import argparse

from tqdm import tqdm

from savory import create_app
from savory.errors import StorageError
from savory.models import Recipe, Review, User
from savory.utils.seed import load_seed_records, seed_path

DOCUMENTS = (
    ('recipes', Recipe),
    ('reviews', Review),
    ('users', User),
)


def write_seed(store, seed_dir, force=False):
    """Write the bundled datasets into the store, skipping documents that already exist."""
    written = {}
    for key, model in DOCUMENTS:
        try:
            existing = store.load(key)
        except StorageError:
            existing = None
        if existing and not force:
            print(f"Document '{key}' already present, skipping (use --force to overwrite)")
            continue

        records = load_seed_records(seed_path(seed_dir, key))
        converted = []
        for record in tqdm(records, desc=f"Processing {key}"):
            item = model.from_dict(record)
            converted.append(item.to_record() if isinstance(item, User) else item.to_dict())

        store.save(key, converted)
        written[key] = len(converted)
        print(f"Wrote {len(converted)} {key}")
    return written


def main():
    parser = argparse.ArgumentParser(description='Load the bundled seed dataset into the configured store')
    parser.add_argument('--force', action='store_true', help='Overwrite existing documents')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        write_seed(app.document_store, app.config['SEED_DATA_DIR'], force=args.force)

    print("Seeding completed!")


if __name__ == "__main__":
    main()
