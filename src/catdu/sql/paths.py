CREATE_TABLE: str = """
    CREATE TABLE IF NOT EXISTS path (
        id   INTEGER PRIMARY KEY,
        path TEXT NOT NULL UNIQUE
    );
"""

INSERT_PATH: str = """
    INSERT INTO path (path)
    VALUES (?)
    ON CONFLICT(path) DO NOTHING;
"""

SELECT_PATH_ID: str = """SELECT id FROM path WHERE path = ?;"""
