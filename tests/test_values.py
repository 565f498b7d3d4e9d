import pytest

from metronomeops.core.errors import ValidationError
from metronomeops.core.values import ContainerPath, MountMode, Operator


@pytest.mark.parametrize("op", list(Operator))
def test_operator_round_trips(op: Operator):
    assert Operator.parse(op.render()) is op


@pytest.mark.parametrize("token", ["EQ", "LIKE", "UNLIKE"])
def test_operator_render_of_parse_is_identity(token: str):
    assert Operator.parse(token).render() == token


@pytest.mark.parametrize("token", ["", "eq", "NEQ", "GROUP_BY"])
def test_operator_rejects_unknown_token(token: str):
    with pytest.raises(ValidationError, match="EQ, LIKE or UNLIKE"):
        Operator.parse(token)


def test_operator_error_names_the_token():
    with pytest.raises(ValidationError, match="'CLUSTER'"):
        Operator.parse("CLUSTER")


@pytest.mark.parametrize("mode", list(MountMode))
def test_mount_mode_round_trips(mode: MountMode):
    assert MountMode.parse(mode.render()) is mode


@pytest.mark.parametrize("token", ["rw", "WO", "READ"])
def test_mount_mode_rejects_unknown_token(token: str):
    with pytest.raises(ValidationError, match=token):
        MountMode.parse(token)


@pytest.mark.parametrize("path", ["relative/path", "/", "//double", ""])
def test_container_path_rejects_invalid_paths(path: str):
    with pytest.raises(ValidationError, match="container path"):
        ContainerPath.parse(path)


def test_container_path_accepts_absolute_path():
    path = ContainerPath.parse("/mnt/test")

    assert str(path) == "/mnt/test"
    assert ContainerPath.parse(path) is path


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        ContainerPath("nope")
