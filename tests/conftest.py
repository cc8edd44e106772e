import pytest

from catdu.catalog_db import CatalogDB
from catdu.CatalogStore import CatalogStore
from tests.helpers import encode_digest, encode_lstat, make_stat

# (directory, filename, size, blocks)
SAMPLE_FILES = [
    ("/a/b/", "file1", 100, 8),
    ("/a/c/", "file2", 200, 8),
    ("/a/c/d/", "file3", 5000, 16),
    ("/homer/", "notes", 10, 8),
]


@pytest.fixture
def catalog_path(tmp_path):
    return tmp_path / "catalog.db"


@pytest.fixture
def store(catalog_path):
    with CatalogDB(catalog_path) as db:
        yield CatalogStore(db)


@pytest.fixture
def job_id(store):
    """A job holding SAMPLE_FILES, each with a digest of its own."""
    store.begin()
    new_job: int = store.insert_job("nightly", started_at=1700000000)
    for number, (directory, filename, size, blocks) in enumerate(SAMPLE_FILES, start=1):
        store.insert_file(
            job_id=new_job,
            directory=directory,
            filename=filename,
            lstat=encode_lstat(make_stat(size=size, blocks=blocks, inode=number)),
            digest=encode_digest(number << 100),
        )
    store.commit()
    return new_job
