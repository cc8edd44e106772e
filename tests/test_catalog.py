import pytest

from catdu.CatalogStore import directory_pattern, escape_like
from catdu.errors import CatalogError
from catdu.models import Payload, Record


def test_iter_records_streams_job_in_path_order(store, job_id):
    records = list(store.iter_records(job_id, payload=Payload.NONE))

    assert records == [
        Record("/a/b/", "file1", None),
        Record("/a/c/", "file2", None),
        Record("/a/c/d/", "file3", None),
        Record("/homer/", "notes", None),
    ]


def test_iter_records_payload_columns(store, job_id):
    lstats = [record.payload for record in store.iter_records(job_id, payload=Payload.LSTAT)]
    digests = [record.payload for record in store.iter_records(job_id, payload=Payload.DIGEST)]

    assert all(len(payload.split()) == 14 for payload in lstats)
    assert all(len(payload) == 22 for payload in digests)


def test_iter_records_sub_path(store, job_id):
    directories = [record.directory for record in store.iter_records(job_id, root="/a/c")]

    assert directories == ["/a/c/", "/a/c/d/"]


def test_iter_records_prefix_stops_at_path_boundary(store, job_id):
    store.begin()
    other = store.insert_job("other")
    store.insert_file(job_id=other, directory="/home/", filename="x")
    store.insert_file(job_id=other, directory="/homer/", filename="y")
    store.insert_file(job_id=other, directory="/home_old/", filename="z")
    store.commit()

    assert [r.filename for r in store.iter_records(other, root="/home", payload=Payload.NONE)] == ["x"]
    assert [r.filename for r in store.iter_records(other, root="/home_", payload=Payload.NONE)] == []


def test_iter_records_other_job_is_empty(store, job_id):
    assert list(store.iter_records(job_id + 1)) == []


def test_directory_pattern():
    assert directory_pattern(None) == "%"
    assert directory_pattern("/") == "/%"
    assert directory_pattern("/a/b/") == "/a/b/%"
    assert directory_pattern("C:") == "C:/%"
    assert directory_pattern("/100%_done") == "/100\\%\\_done/%"


def test_escape_like():
    assert escape_like("a\\b") == "a\\\\b"


def test_get_job(store, job_id):
    job = store.get_job(job_id)

    assert job.name == "nightly"
    assert job.started_at == 1700000000
    assert job.file_count == 4


def test_get_job_unknown(store):
    with pytest.raises(CatalogError, match="Job 99"):
        store.get_job(99)


def test_list_jobs(store, job_id):
    store.begin()
    store.insert_job("empty", started_at=1)
    store.commit()

    assert [(job.name, job.file_count) for job in store.list_jobs()] == [("nightly", 4), ("empty", 0)]


def test_paths_are_shared_between_jobs(store, job_id):
    first = store.get_or_create_path("/a/b/")
    second = store.get_or_create_path("/a/b/")

    assert first == second
