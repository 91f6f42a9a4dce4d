"""
Unit tests for the applications repository.

These tests cover:
- Nullable section columns storing Python None as SQL NULL
- The admin list filters, compiled with the PostgreSQL dialect
- Escaping of LIKE wildcards in search terms
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from app.modules.applications import repository
from app.modules.applications.models import Application


def _list_results(rows, total):
    """Results for the count query followed by the page query."""
    count_result = MagicMock()
    count_result.scalar.return_value = total
    rows_result = MagicMock()
    rows_result.scalars.return_value.all.return_value = rows
    return [count_result, rows_result]


def _page_query(mock_db):
    statement = mock_db.execute.await_args_list[-1].args[0]
    return statement.compile(dialect=postgresql.dialect())


class TestSectionColumns:
    """None assigned to a section column must reach the database as NULL."""

    @pytest.mark.parametrize("name", ["offer_letter", "gic", "course_fee"])
    def test_none_is_stored_as_sql_null(self, name):
        column_type = Application.__table__.c[name].type

        assert column_type.none_as_null is True
        assert column_type.should_evaluate_none is False

        process = column_type.bind_processor(postgresql.dialect())
        if process is not None:
            assert process(None) is None


class TestListApplications:
    """Tests for list_applications()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,column",
        [
            ("offerLetter", "applications.offer_letter"),
            ("gic", "applications.gic"),
            ("courseFee", "applications.course_fee"),
        ],
    )
    async def test_kind_filter_requires_section(self, mock_db, kind, column):
        application = Application(application_id="AP-24092601")
        mock_db.execute.side_effect = _list_results([application], 1)

        applications, total = await repository.list_applications(mock_db, kind=kind)

        assert applications == [application]
        assert total == 1
        sql = str(_page_query(mock_db))
        assert f"{column} IS NOT NULL" in sql

    @pytest.mark.asyncio
    async def test_no_kind_has_no_section_filter(self, mock_db):
        mock_db.execute.side_effect = _list_results([], 0)

        applications, total = await repository.list_applications(mock_db)

        assert applications == []
        assert total == 0
        assert "IS NOT NULL" not in str(_page_query(mock_db))

    @pytest.mark.asyncio
    async def test_full_name_wildcards_are_escaped(self, mock_db):
        mock_db.execute.side_effect = _list_results([], 0)

        await repository.list_applications(mock_db, full_name="50%_off")

        compiled = _page_query(mock_db)
        assert "ESCAPE '/'" in str(compiled)
        # One term per section that carries a name
        assert list(compiled.params.values()).count("50/%/_off") == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "filters,escaped",
        [
            ({"application_id": "AP-2409_"}, "AP-2409/_"),
            ({"country": "100%"}, "100/%"),
            ({"institution": "a/b"}, "a//b"),
        ],
    )
    async def test_search_filters_are_escaped(self, mock_db, filters, escaped):
        mock_db.execute.side_effect = _list_results([], 0)

        await repository.list_applications(mock_db, **filters)

        compiled = _page_query(mock_db)
        assert "ESCAPE '/'" in str(compiled)
        assert escaped in compiled.params.values()


class TestAdminStats:
    """Tests for get_admin_stats()."""

    @pytest.mark.asyncio
    async def test_course_fee_requests_count_non_null_payloads(self, mock_db):
        row = MagicMock()
        row._mapping = {"total": 4, "course_fee_requests": 1}
        result = MagicMock()
        result.one.return_value = row
        mock_db.execute.return_value = result

        stats = await repository.get_admin_stats(mock_db, week_start=datetime.now(UTC))

        assert stats["course_fee_requests"] == 1
        sql = str(_page_query(mock_db))
        assert "applications.course_fee IS NOT NULL" in sql
