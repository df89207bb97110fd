from datetime import datetime
from sqlite3 import Connection, IntegrityError
from typing import Iterable, Optional

from etell.errors import DuplicateSampleError, SessionExistsError, SessionNotFoundError
from etell.storage.db import init_db
from etell.utils.log import get_logger
from etell.utils.validate import CalibrationSetup, Sample, Session, SessionSummary

logger = get_logger(__name__)


def _iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts is not None else None


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value is not None else None


class DAO:
    """
    Encapsulates all inserts/queries against the calibration session DB.
    """

    def __init__(self, db_path: str):
        """
        Create/connect and apply schema if needed.
        """
        self.conn: Connection = init_db(db_path)

    def close(self) -> None:
        self.conn.close()

    def add_session(self, session: Session, sha256: Optional[str] = None) -> None:
        """
        Insert a session and all of its samples in one transaction.

        Raises
        ------
        SessionExistsError
            If a session with the same id (or from the same source file) is
            already stored. Nothing is written in that case.
        """
        if self._exists(session.id):
            raise SessionExistsError(
                f"Session {session.id} is already stored", {"session_id": session.id}
            )
        setup = session.setup or CalibrationSetup()
        try:
            with self.conn:
                self._insert_session(session, setup, sha256)
        except IntegrityError as exc:
            raise SessionExistsError(
                f"Session {session.id} conflicts with a stored session: {exc}",
                {"session_id": session.id},
            ) from exc

    def _insert_session(
        self, session: Session, setup: CalibrationSetup, sha256: Optional[str]
    ) -> None:
        self.conn.execute(
            """
            INSERT INTO sessions
              (id, sha256, started_at, ended_at, environment_type, number_of_floors, has_hallways)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                session.id,
                sha256,
                _iso(session.started_at),
                _iso(session.ended_at),
                setup.environment_type.value if setup.environment_type else None,
                setup.number_of_floors,
                None if setup.has_hallways is None else int(setup.has_hallways),
            ),
        )
        self._insert_samples(session.id, session.samples, start_seq=0)

    def session_exists(self, sha256: str) -> bool:
        """
        Check if a session ingested from a file with the given SHA256 exists.
        """
        cursor = self.conn.execute(
            "SELECT 1 FROM sessions WHERE sha256 = ? LIMIT 1",
            (sha256,),
        )
        return cursor.fetchone() is not None

    def add_samples_bulk(self, session_id: str, samples: Iterable[Sample]) -> None:
        """
        Append samples to an existing session, after any already stored.

        The batch is all-or-nothing: if any sample id is already in the
        session, DuplicateSampleError is raised and nothing is appended.
        """
        self._require(session_id)
        cur = self.conn.execute(
            "SELECT COALESCE(MAX(seq) + 1, 0) FROM samples WHERE session_id = ?",
            (session_id,),
        )
        start_seq = cur.fetchone()[0]
        try:
            with self.conn:
                self._insert_samples(session_id, samples, start_seq)
        except IntegrityError as exc:
            raise DuplicateSampleError(
                f"Session {session_id} already holds one of these sample ids",
                {"session_id": session_id},
            ) from exc

    def _insert_samples(self, session_id: str, samples: Iterable[Sample], start_seq: int) -> None:
        sql = """
        INSERT INTO samples
          (id, session_id, seq, name, lat, lon, relative_height, signal_strength,
           ts, distance_from_previous, floor, heading, step_count)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        params = (
            (
                s.id,
                session_id,
                start_seq + i,
                s.name,
                s.position[0],
                s.position[1],
                s.relative_height,
                s.signal_strength,
                _iso(s.timestamp),
                s.distance_from_previous,
                s.floor,
                s.heading,
                s.step_count,
            )
            for i, s in enumerate(samples)
        )
        self.conn.executemany(sql, params)

    def end_session(self, session_id: str, ended_at: datetime) -> None:
        """
        Stamp the session's end time.
        """
        self._require(session_id)
        with self.conn:
            self.conn.execute(
                "UPDATE sessions SET ended_at = ? WHERE id = ?",
                (_iso(ended_at), session_id),
            )

    def delete_session(self, session_id: str) -> None:
        self._require(session_id)
        with self.conn:
            self.conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))

    def _exists(self, session_id: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM sessions WHERE id = ?", (session_id,)
        ).fetchone()
        return row is not None

    def _require(self, session_id: str) -> None:
        if not self._exists(session_id):
            raise SessionNotFoundError(
                f"Unknown session {session_id}", {"session_id": session_id}
            )

    def get_session(self, session_id: str) -> Session:
        """
        Return the session with its samples in capture order.
        """
        row = self.conn.execute(
            "SELECT * FROM sessions WHERE id = ?", (session_id,)
        ).fetchone()
        if row is None:
            raise SessionNotFoundError(
                f"Unknown session {session_id}", {"session_id": session_id}
            )
        setup = None
        if any(row[k] is not None for k in ("environment_type", "number_of_floors", "has_hallways")):
            setup = CalibrationSetup(
                environment_type=row["environment_type"],
                number_of_floors=row["number_of_floors"],
                has_hallways=None if row["has_hallways"] is None else bool(row["has_hallways"]),
            )
        samples = [
            Sample(
                id=s["id"],
                name=s["name"],
                position=(s["lat"], s["lon"]),
                relative_height=s["relative_height"],
                signal_strength=s["signal_strength"],
                timestamp=_parse_ts(s["ts"]),
                distance_from_previous=s["distance_from_previous"],
                floor=s["floor"],
                heading=s["heading"],
                step_count=s["step_count"],
            )
            for s in self.conn.execute(
                "SELECT * FROM samples WHERE session_id = ? ORDER BY seq",
                (session_id,),
            )
        ]
        return Session(
            id=row["id"],
            started_at=_parse_ts(row["started_at"]),
            ended_at=_parse_ts(row["ended_at"]),
            samples=samples,
            setup=setup,
        )

    def list_sessions(self) -> list[SessionSummary]:
        """
        Return one summary per session, oldest first.
        """
        cursor = self.conn.execute(
            """
            SELECT s.id, s.started_at, s.ended_at, COUNT(p.id) AS n_samples
            FROM sessions s
            LEFT JOIN samples p ON p.session_id = s.id
            GROUP BY s.id
            ORDER BY s.started_at
            """
        )
        return [
            SessionSummary(
                id=row["id"],
                started_at=_parse_ts(row["started_at"]),
                ended_at=_parse_ts(row["ended_at"]),
                n_samples=row["n_samples"],
            )
            for row in cursor.fetchall()
        ]
