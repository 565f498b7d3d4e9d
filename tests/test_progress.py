from metronomeops.cli.common.progress import _display_job_label


def test_display_job_label_id_before_description_and_aligned():
    descriptions = {"nightly.backup": "Nightly backup", "etl": "Load warehouse"}
    labels = {
        job_id: _display_job_label(job_id, descriptions, id_width=14)
        for job_id in descriptions
    }

    assert labels["nightly.backup"].startswith("nightly.backup")
    assert labels["etl"].startswith("etl")
    assert labels["nightly.backup"].index("Nightly") == labels["etl"].index("Load")


def test_display_job_label_falls_back_to_id_when_description_missing():
    assert _display_job_label("etl", {"other": "x"}, id_width=10) == "etl"
    assert _display_job_label("etl", None, id_width=10) == "etl"
