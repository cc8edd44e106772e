import logging
import sqlite3
import time
from collections.abc import Iterator
from typing import cast

from .aggregate import is_terminal, normalize_path
from .catalog_db import CatalogDB
from .errors import CatalogError
from .models import Job, Payload, Record
from .sql import files, jobs, paths

logger: logging.Logger = logging.getLogger(__name__)

_RECORD_QUERIES: dict[Payload, str] = {
    Payload.NONE: files.SELECT_RECORDS,
    Payload.LSTAT: files.SELECT_RECORDS_WITH_LSTAT,
    Payload.DIGEST: files.SELECT_RECORDS_WITH_DIGEST,
}


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def directory_pattern(root: str | None) -> str:
    """
    LIKE pattern matching every catalog directory at or below root.

    Catalog directories carry a trailing slash, so "/home" matches
    "/home/" and "/home/x/" but not "/homer/".
    """
    if root is None:
        return "%"

    key: str = normalize_path(root)
    if not is_terminal(key):
        key += "/"
    return escape_like(key) + "%"


def _to_job(row: sqlite3.Row) -> Job:
    return Job(
        id=cast(int, row["id"]),
        name=cast(str, row["name"]),
        started_at=cast(int | None, row["started_at"]),
        file_count=cast(int, row["file_count"]),
    )


class CatalogStore:
    def __init__(self, catalog_db: CatalogDB) -> None:
        self.db: CatalogDB = catalog_db

    def begin(self) -> None:
        self.db.begin()

    def commit(self) -> None:
        self.db.commit()

    def insert_job(self, name: str, started_at: int | None = None) -> int:
        if started_at is None:
            started_at = int(time.time())

        job_id: int | None = self.db.execute(sql=jobs.INSERT_JOB, params=(name, started_at))

        assert job_id is not None

        return job_id

    def get_or_create_path(self, directory: str) -> int:
        self.db.execute(sql=paths.INSERT_PATH, params=(directory,))
        row: sqlite3.Row | None = self.db.query_one(sql=paths.SELECT_PATH_ID, params=(directory,))

        assert row is not None

        return cast(int, row["id"])

    def insert_file(
        self,
        *,
        job_id: int,
        directory: str,
        filename: str,
        lstat: str | None = None,
        digest: str | None = None,
    ) -> None:
        path_id: int = self.get_or_create_path(directory)
        self.db.execute(sql=files.INSERT_FILE, params=(job_id, path_id, filename, lstat, digest))

    def get_job(self, job_id: int) -> Job:
        row: sqlite3.Row | None = self.db.query_one(sql=jobs.SELECT_JOB, params=(job_id,))

        if row is None:
            raise CatalogError(f"Job {job_id} not found in catalog")

        return _to_job(row)

    def list_jobs(self) -> list[Job]:
        return [_to_job(row) for row in self.db.query(sql=jobs.SELECT_JOBS)]

    def iter_records(self, job_id: int, *, root: str | None = None, payload: Payload = Payload.LSTAT) -> Iterator[Record]:
        """
        Stream the files of one job, ordered by directory and name.

        Only directories at or below `root` are returned when it is given.
        """
        pattern: str = directory_pattern(root)
        logger.debug("Reading job %d records matching %r (%s)", job_id, pattern, payload.value)

        for row in self.db.query(sql=_RECORD_QUERIES[payload], params=(job_id, pattern)):
            yield Record(
                directory=cast(str, row["directory"]),
                filename=cast(str, row["filename"]),
                payload=cast(str | None, row["payload"]),
            )
