"""Tests for the SQLite session store."""

from datetime import datetime, timezone

import pytest

from etell.errors import DuplicateSampleError, SessionExistsError, SessionNotFoundError
from etell.storage.dao import DAO
from etell.storage.db import SCHEMA_VERSION, schema_version
from etell.utils.validate import CalibrationSetup, EnvironmentType, Sample, Session


def _session():
    return Session(
        started_at=datetime(2025, 9, 1, 18, 0, tzinfo=timezone.utc),
        samples=[
            Sample(name="Living Room", position=(37.7749, -122.4194), signal_strength=0.9, heading=12.5),
            Sample(name="Kitchen", position=(37.7750, -122.4194), signal_strength=0.5,
                   relative_height=0.3, distance_from_previous=11.1, step_count=14),
            Sample(name="Bedroom", position=(37.7751, -122.4195), signal_strength=0.2, floor=2),
        ],
        setup=CalibrationSetup(environment_type=EnvironmentType.HOUSE, number_of_floors=2, has_hallways=False),
    )


@pytest.fixture()
def dao(tmp_path):
    dao = DAO(str(tmp_path / "etell.sqlite"))
    yield dao
    dao.close()


def test_round_trip(dao):
    session = _session()
    dao.add_session(session, sha256="abc")
    loaded = dao.get_session(session.id)
    assert loaded.model_dump() == session.model_dump()
    assert dao.session_exists("abc")
    assert not dao.session_exists("def")


def test_session_without_setup(dao):
    session = Session(samples=[])
    dao.add_session(session)
    loaded = dao.get_session(session.id)
    assert loaded.setup is None
    assert loaded.samples == []


def test_append_and_end(dao):
    session = _session()
    dao.add_session(session)
    extra = Sample(name="Garage", position=(37.7752, -122.4195), signal_strength=0.1)
    dao.add_samples_bulk(session.id, [extra])
    ended = datetime(2025, 9, 1, 18, 30, tzinfo=timezone.utc)
    dao.end_session(session.id, ended)

    loaded = dao.get_session(session.id)
    assert [s.name for s in loaded.samples] == ["Living Room", "Kitchen", "Bedroom", "Garage"]
    assert loaded.ended_at == ended
    assert loaded.is_complete


def test_list_and_delete(dao):
    first, second = _session(), Session(samples=[])
    dao.add_session(first)
    dao.add_session(second)
    summaries = {s.id: s for s in dao.list_sessions()}
    assert summaries[first.id].n_samples == 3
    assert summaries[second.id].n_samples == 0

    dao.delete_session(first.id)
    assert [s.id for s in dao.list_sessions()] == [second.id]


def test_unknown_session(dao):
    with pytest.raises(SessionNotFoundError):
        dao.get_session("nope")
    with pytest.raises(SessionNotFoundError):
        dao.add_samples_bulk("nope", [])


def test_reopen_keeps_sessions(tmp_path):
    path = str(tmp_path / "etell.sqlite")
    first = DAO(path)
    session = _session()
    first.add_session(session)
    first.close()

    second = DAO(path)
    assert schema_version(second.conn) == SCHEMA_VERSION
    assert second.get_session(session.id).samples[0].name == "Living Room"
    second.close()


def test_storing_a_session_twice_is_rejected(dao):
    session = _session()
    dao.add_session(session, sha256="abc")
    with pytest.raises(SessionExistsError) as exc:
        dao.add_session(session, sha256="def")
    assert exc.value.details == {"session_id": session.id}
    assert not dao.session_exists("def")
    assert len(dao.get_session(session.id).samples) == 3


def test_same_source_file_is_rejected(dao):
    dao.add_session(_session(), sha256="abc")
    with pytest.raises(SessionExistsError):
        dao.add_session(_session(), sha256="abc")
    assert len(dao.list_sessions()) == 1


def test_sample_ids_are_scoped_to_their_session(dao):
    first = _session()
    # same sample ids, different session
    second = Session(samples=[s.model_copy() for s in first.samples])
    dao.add_session(first)
    dao.add_session(second)
    assert [s.id for s in dao.get_session(second.id).samples] == [s.id for s in first.samples]


def test_appending_a_stored_sample_id_is_rejected(dao):
    session = _session()
    dao.add_session(session)
    garage = Sample(name="Garage", position=(37.7752, -122.4195), signal_strength=0.1)
    with pytest.raises(DuplicateSampleError):
        dao.add_samples_bulk(session.id, [garage, session.samples[0]])
    assert [s.name for s in dao.get_session(session.id).samples] == ["Living Room", "Kitchen", "Bedroom"]
