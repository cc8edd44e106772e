CREATE_TABLE: str = """
    CREATE TABLE IF NOT EXISTS file (
        id      INTEGER PRIMARY KEY,
        job_id  INTEGER NOT NULL REFERENCES job(id),
        path_id INTEGER NOT NULL REFERENCES path(id),
        name    TEXT NOT NULL,
        lstat   TEXT,
        digest  TEXT
    );
"""
CREATE_INDEXES: tuple[str, ...] = ("CREATE INDEX IF NOT EXISTS idx_file_job ON file(job_id);",)

INSERT_FILE: str = """
    INSERT INTO file (
        job_id,
        path_id,
        name,
        lstat,
        digest
    )
    VALUES (?, ?, ?, ?, ?);
"""

# Payload column is chosen from a fixed set, never from user input.
_SELECT_RECORDS: str = """
    SELECT
        path.path AS directory,
        file.name AS filename,
        {payload} AS payload
    FROM file
    JOIN path ON path.id = file.path_id
    WHERE file.job_id = ?
      AND path.path LIKE ? ESCAPE '\\'
    ORDER BY path.path, file.name;
"""

SELECT_RECORDS_WITH_LSTAT: str = _SELECT_RECORDS.format(payload="file.lstat")
SELECT_RECORDS_WITH_DIGEST: str = _SELECT_RECORDS.format(payload="file.digest")
SELECT_RECORDS: str = _SELECT_RECORDS.format(payload="NULL")
