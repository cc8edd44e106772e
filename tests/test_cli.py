import pytest
from typer.testing import CliRunner

from catdu.config import AppConfig
from catdu.main import app
from tests.helpers import encode_digest, encode_lstat, make_stat

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_du_with_catalog_option(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["du", str(job_id), "--catalog", str(catalog_path), "--apparent-size", "-B", "1"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [" 100 /a/b", "5000 /a/c/d", "5200 /a/c", "5300 /a", "  10 /homer", "5310 /"]


def test_du_top_and_path(workdir, catalog_path, job_id):
    result = runner.invoke(
        app, ["du", str(job_id), "/a", "--catalog", str(catalog_path), "--apparent-size", "-B", "1", "-n", "1"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["5300 /a"]


def test_du_format(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["du", str(job_id), "/a/b", "--catalog", str(catalog_path), "--format", "%9s %n"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["      100 /a/b/file1"]


def test_du_unimplemented_format(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["du", str(job_id), "--catalog", str(catalog_path), "--format", "%C"])

    assert result.exit_code == 1
    assert "%C is not implemented" in result.output


def test_du_bad_threshold(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["du", str(job_id), "--catalog", str(catalog_path), "-t", "bogus"])

    assert result.exit_code == 2
    assert "bogus" in result.output


def test_du_unknown_job(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["du", "999", "--catalog", str(catalog_path)])

    assert result.exit_code == 1
    assert "Job 999 not found" in result.output


def test_du_without_config(workdir):
    result = runner.invoke(app, ["du", "1"])

    assert result.exit_code == 1
    assert "catdu init" in result.output


def test_du_missing_catalog(workdir):
    result = runner.invoke(app, ["du", "1", "--catalog", str(workdir / "nope.db")])

    assert result.exit_code == 1
    assert "does not exist" in result.output
    assert not (workdir / "nope.db").exists()


def test_init_then_du(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["init", str(catalog_path), "--block-size", "1"])
    assert result.exit_code == 0, result.output
    assert AppConfig.load().block_size == 1

    again = runner.invoke(app, ["init", str(catalog_path)])
    assert again.exit_code == 1

    report = runner.invoke(app, ["du", str(job_id), "--count"])
    assert report.exit_code == 0, report.output
    assert report.output.splitlines()[-1] == "4 /"


def test_digests(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["digests", str(job_id), "/homer", "--catalog", str(catalog_path)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [f"{4 << 100:032x}  /homer/notes"]


def test_jobs(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["jobs", "--catalog", str(catalog_path)])

    assert result.exit_code == 0, result.output
    assert "nightly" in result.output
    assert result.output.split()[0] == str(job_id)


def test_version(workdir):
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.output.strip()


def test_bad_log_level(workdir, catalog_path, job_id):
    result = runner.invoke(app, ["--log-level", "LOUD", "jobs", "--catalog", str(catalog_path)])

    assert result.exit_code == 2


def test_du_format_time_out_of_range(workdir, catalog_path, store):
    store.begin()
    job = store.insert_job("future")
    store.insert_file(
        job_id=job, directory="/a/", filename="f", lstat=encode_lstat(make_stat(blocks=8, mtime=2**40))
    )
    store.commit()

    result = runner.invoke(app, ["du", str(job), "--catalog", str(catalog_path), "--format", "%y %n"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert str(2**40) in result.output
    assert not isinstance(result.exception, ValueError)


def test_digests_corrupt_entry_prints_no_partial_list(workdir, catalog_path, store):
    store.begin()
    job = store.insert_job("corrupt")
    store.insert_file(job_id=job, directory="/a/", filename="good", digest=encode_digest(5))
    store.insert_file(job_id=job, directory="/b/", filename="bad", digest="A" * 21 + "B")
    store.commit()

    result = runner.invoke(app, ["digests", str(job), "--catalog", str(catalog_path)])

    assert result.exit_code == 1
    assert "Error: Corrupt digest" in result.output
    assert f"{5:032x}" not in result.output
    assert "/a/good" not in result.output


@pytest.mark.parametrize(
    "content",
    [
        "config:\n  block_size: 1\n",
        "config: nope\n",
        "",
        "config: [unclosed\n",
    ],
)
def test_malformed_config_is_reported(workdir, content):
    (workdir / "config.yaml").write_text(content, encoding="utf-8")

    result = runner.invoke(app, ["jobs"])

    assert result.exit_code == 1
    assert "Error: Invalid config.yaml" in result.output
