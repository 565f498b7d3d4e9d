import pytest

from metronomeops.core.models import Job, Labels, Run
from metronomeops.core.selectors import (
    AndSelector,
    IdRegexSelector,
    LabelSelector,
    OrSelector,
)

RUN = Run.create(1, 32, 32)


def test_id_regex_selector_matches():
    job = Job(id="nightly.backup", run=RUN, labels=Labels(owner="zeus"))
    selector = IdRegexSelector("^nightly")

    assert selector.matches(job) is True


def test_id_regex_selector_no_match():
    job = Job(id="weekly.backup", run=RUN, labels=Labels(owner="zeus"))
    selector = IdRegexSelector("^nightly")

    assert selector.matches(job) is False


def test_id_regex_selector_rejects_invalid_pattern():
    with pytest.raises(ValueError, match="Invalid regex"):
        IdRegexSelector("(")


def test_label_selector_handles_missing_labels():
    job = Job(id="etl", run=RUN, labels=None)
    selector = LabelSelector("owner", "zeus")

    assert selector.matches(job) is False


def test_label_selector_ignores_unknown_keys():
    job = Job(id="etl", run=RUN, labels=Labels(location="olympus", owner="zeus"))

    assert LabelSelector("team", "zeus").matches(job) is False


def test_and_or_selectors():
    job = Job(id="nightly.etl", run=RUN, labels=Labels(location="olympus", owner="zeus"))

    id_sel = IdRegexSelector("nightly")
    label_sel = LabelSelector("owner", "zeus")

    assert AndSelector([id_sel, label_sel]).matches(job) is True
    assert AndSelector([id_sel, LabelSelector("owner", "hera")]).matches(job) is False
    assert OrSelector([id_sel, LabelSelector("location", "hades")]).matches(job) is True
