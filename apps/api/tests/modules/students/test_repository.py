"""
Unit tests for the student information repository.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from app.modules.students import repository
from app.modules.students.models import StudentInformation


@pytest.mark.parametrize("name", ["residence", "preferences"])
def test_optional_sections_are_stored_as_sql_null(name):
    column_type = StudentInformation.__table__.c[name].type

    assert column_type.none_as_null is True
    assert column_type.should_evaluate_none is False


def test_one_profile_per_student():
    constraints = {
        constraint.name: [column.name for column in constraint.columns]
        for constraint in StudentInformation.__table__.constraints
        if constraint.name
    }

    assert constraints["uq_student_information_student_id"] == ["student_id"]


@pytest.mark.asyncio
async def test_list_profiles_escapes_search_wildcards(mock_db):
    count_result = MagicMock()
    count_result.scalar.return_value = 0
    rows_result = MagicMock()
    rows_result.scalars.return_value.all.return_value = []
    mock_db.execute.side_effect = [count_result, rows_result]

    profiles, total = await repository.list_profiles(mock_db, search="rao_%")

    assert profiles == []
    assert total == 0
    statement = mock_db.execute.await_args_list[-1].args[0]
    compiled = statement.compile(dialect=postgresql.dialect())
    assert "ESCAPE '/'" in str(compiled)
    # First name, last name and email
    assert list(compiled.params.values()).count("rao/_/%") == 3
