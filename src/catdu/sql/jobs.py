CREATE_TABLE: str = """
    CREATE TABLE IF NOT EXISTS job (
        id         INTEGER PRIMARY KEY,
        name       TEXT NOT NULL,
        started_at INTEGER
    );
"""

INSERT_JOB: str = """
    INSERT INTO job (name, started_at)
    VALUES (?, ?);
"""

SELECT_JOB: str = """
    SELECT
        job.id,
        job.name,
        job.started_at,
        (SELECT COUNT(*) FROM file WHERE file.job_id = job.id) AS file_count
    FROM job
    WHERE job.id = ?;
"""

SELECT_JOBS: str = """
    SELECT
        job.id,
        job.name,
        job.started_at,
        COUNT(file.id) AS file_count
    FROM job
    LEFT JOIN file ON file.job_id = job.id
    GROUP BY job.id
    ORDER BY job.id;
"""
