import logging
import os

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_SEED_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'data')

SEED_FILES = {
    'recipes': 'recipes.json',
    'reviews': 'reviews.json',
    'users': 'users.json',
}


def load_seed_records(path):
    """
    Read a bundled dataset into a list of plain dict records.

    Both the JSON export (list of objects) and the raw CSV dump are accepted.
    Missing cells come back as None so the model converters apply their
    defaults.
    """
    if not path or not os.path.exists(path):
        logger.warning("Seed file not found: %s", path)
        return []

    if path.endswith('.csv'):
        df = pd.read_csv(path)
    else:
        df = pd.read_json(path, orient='records', dtype=False, convert_dates=False)

    if df.empty:
        return []

    df = df.astype(object).where(pd.notna(df), None)
    records = df.to_dict(orient='records')
    logger.info("Loaded %d seed records from %s", len(records), path)
    return records


def seed_path(seed_dir, name):
    return os.path.join(seed_dir or DEFAULT_SEED_DIR, SEED_FILES[name])
