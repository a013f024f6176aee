"""
Tests for MatchRepository against SQLite.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from database.models import Match, generate_match_id
from database.repositories import MatchRepository

pytestmark = pytest.mark.db


def new_match(resume_id="R1", job_id="J1", overall=0.8, **extra):
    fields = dict(
        match_id=generate_match_id(resume_id, job_id),
        resume_id=resume_id,
        job_id=job_id,
        candidate={"name": "Ada"},
        job={"title": f"Job {job_id}"},
        overall_fit=overall,
        confidence=0.9,
        recommendation="recommended",
        strengths=["Python"],
        concerns=[],
        model_version="test-model",
    )
    fields.update(extra)
    return Match(**fields)


@pytest.fixture
def seed(database):
    def _seed(*matches):
        with database.session_scope() as session:
            for m in matches:
                session.add(m)
    return _seed


class TestGenerateMatchId:

    def test_deterministic_per_pair(self):
        assert generate_match_id("R1", "J1") == generate_match_id("R1", "J1")
        assert generate_match_id("R1", "J1") != generate_match_id("R1", "J2")
        assert generate_match_id("R1", "J1").startswith("match_")
        assert len(generate_match_id("R1", "J1")) == len("match_") + 12


class TestCreateOrGet:

    def test_creates_new(self, database):
        with database.session_scope() as session:
            match, created = MatchRepository(session).create_or_get(new_match())
            assert created
            assert match.id is not None
            assert match.status == "analyzed"
            assert match.viewed is False

    def test_duplicate_pair_returns_existing(self, database, seed, count_matches):
        seed(new_match(overall=0.9))

        with database.session_scope() as session:
            match, created = MatchRepository(session).create_or_get(new_match(overall=0.1))
            assert not created
            assert match.overall_fit == 0.9

        assert count_matches("R1", "J1") == 1

    def test_unique_pair_enforced_by_storage(self, database, seed):
        seed(new_match())

        with pytest.raises(IntegrityError):
            with database.session_scope() as session:
                session.add(new_match(match_id="match_other"))
                session.flush()


class TestListMatches:

    @pytest.fixture(autouse=True)
    def populate(self, seed):
        now = datetime.now(timezone.utc)
        seed(
            new_match("R1", "J1", 0.9, recommendation="highly_recommended", created_at=now - timedelta(hours=3)),
            new_match("R1", "J2", 0.7, created_at=now - timedelta(hours=2)),
            new_match("R1", "J3", 0.5, recommendation="consider", status="reviewed", created_at=now - timedelta(hours=1)),
            new_match("R2", "J1", 0.6, created_at=now),
        )

    def _list(self, database, **kwargs):
        with database.session_scope() as session:
            items, total = MatchRepository(session).list_matches(**kwargs)
            return [(m.resume_id, m.job_id) for m in items], total

    def test_default_sort_by_overall_fit_desc(self, database):
        items, total = self._list(database)

        assert total == 4
        assert items == [("R1", "J1"), ("R1", "J2"), ("R2", "J1"), ("R1", "J3")]

    def test_filter_by_resume_and_score_range(self, database):
        items, total = self._list(database, resume_id="R1", min_score=0.6, max_score=0.8)

        assert items == [("R1", "J2")]
        assert total == 1

    def test_filter_by_recommendation_and_status(self, database):
        assert self._list(database, recommendation="highly_recommended")[0] == [("R1", "J1")]
        assert self._list(database, status="reviewed")[0] == [("R1", "J3")]
        assert self._list(database, job_id="J1")[1] == 2

    def test_sort_by_created_at_asc(self, database):
        items, _ = self._list(database, sort_by="createdAt", sort_order="asc")

        assert items[0] == ("R1", "J1")
        assert items[-1] == ("R2", "J1")

    def test_unknown_sort_falls_back_to_newest_first(self, database):
        items, _ = self._list(database, sort_by="bogus")

        assert items[0] == ("R2", "J1")

    def test_pagination(self, database):
        page1, total = self._list(database, page=1, limit=3)
        page2, _ = self._list(database, page=2, limit=3)

        assert total == 4
        assert len(page1) == 3
        assert page2 == [("R1", "J3")]


class TestReviewerActions:

    def test_status_view_bookmark_delete(self, database, seed):
        seed(new_match())
        match_id = generate_match_id("R1", "J1")

        with database.session_scope() as session:
            repo = MatchRepository(session)
            assert repo.update_status(match_id, "shortlisted").status == "shortlisted"

            viewed = repo.mark_viewed(match_id)
            assert viewed.viewed is True
            assert viewed.viewed_at is not None

            assert repo.toggle_bookmark(match_id).bookmarked is True
            unbookmarked = repo.toggle_bookmark(match_id)
            assert unbookmarked.bookmarked is False
            assert unbookmarked.bookmarked_at is None

            assert repo.delete_match(match_id) is True
            assert repo.delete_match(match_id) is False

    def test_unknown_match_returns_none(self, database):
        with database.session_scope() as session:
            repo = MatchRepository(session)
            assert repo.get_by_match_id("match_missing") is None
            assert repo.update_status("match_missing", "reviewed") is None
            assert repo.mark_viewed("match_missing") is None
            assert repo.toggle_bookmark("match_missing") is None
